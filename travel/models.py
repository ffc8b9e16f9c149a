# travel/models.py
# Shapes of the documents stored in Firestore. Field names in Firestore are
# camelCase (shared with the mobile client); attributes here are snake_case.

from dataclasses import dataclass, asdict

STATUS_PENDING = "pending"
STATUS_ACCEPTED = "accepted"
STATUS_DECLINED = "declined"


@dataclass
class User:
    """User profile. `username` is unique and used for search."""
    id: str = ""
    username: str = ""
    display_name: str = ""
    email: str = ""
    profile_picture_url: str = ""

    @classmethod
    def from_dict(cls, doc_id, data):
        data = data or {}
        return cls(
            id=data.get("id") or doc_id,
            username=data.get("username", ""),
            display_name=data.get("displayName", ""),
            email=data.get("email", ""),
            profile_picture_url=data.get("profilePictureUrl", ""),
        )

    def to_dict(self):
        return {
            "id": self.id,
            "username": self.username,
            "displayName": self.display_name,
            "email": self.email,
            "profilePictureUrl": self.profile_picture_url,
        }


@dataclass
class Trip:
    """
    A named group of photos. At most one trip per user has active=True;
    end_date stays empty while the trip is active.
    """
    id: str = ""
    user_id: str = ""
    name: str = ""
    start_date: str = ""
    end_date: str = ""
    active: bool = False
    photo_count: int = 0

    @classmethod
    def from_dict(cls, doc_id, data):
        data = data or {}
        return cls(
            id=data.get("id") or doc_id,
            user_id=data.get("userId", ""),
            name=data.get("name", ""),
            start_date=data.get("startDate", ""),
            end_date=data.get("endDate", ""),
            active=bool(data.get("active", False)),
            photo_count=int(data.get("photoCount", 0) or 0),
        )

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "name": self.name,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "active": self.active,
            "photoCount": self.photo_count,
        }


@dataclass
class Photo:
    id: str = ""
    user_id: str = ""
    trip_id: str = ""
    image_url: str = ""
    local_path: str = ""
    latitude: float = 0.0
    longitude: float = 0.0
    date: str = ""
    timestamp: int = 0

    @classmethod
    def from_dict(cls, doc_id, data):
        data = data or {}
        return cls(
            id=data.get("id") or doc_id,
            user_id=data.get("userId", ""),
            trip_id=data.get("tripId", ""),
            image_url=data.get("imageUrl", ""),
            local_path=data.get("localPath", ""),
            latitude=float(data.get("latitude", 0.0) or 0.0),
            longitude=float(data.get("longitude", 0.0) or 0.0),
            date=data.get("date", ""),
            timestamp=int(data.get("timestamp", 0) or 0),
        )

    def to_dict(self):
        # localPath only exists on the device before upload
        return {
            "id": self.id,
            "userId": self.user_id,
            "tripId": self.trip_id,
            "imageUrl": self.image_url,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "date": self.date,
            "timestamp": self.timestamp,
        }


@dataclass
class FriendRequest:
    id: str = ""
    sender_id: str = ""
    receiver_id: str = ""
    status: str = STATUS_PENDING

    @classmethod
    def from_dict(cls, doc_id, data):
        data = data or {}
        return cls(
            id=data.get("id") or doc_id,
            sender_id=data.get("senderId", ""),
            receiver_id=data.get("receiverId", ""),
            status=data.get("status", STATUS_PENDING),
        )

    def to_dict(self):
        return {
            "id": self.id,
            "senderId": self.sender_id,
            "receiverId": self.receiver_id,
            "status": self.status,
        }


@dataclass
class Friends:
    """Symmetric friendship; user1_id is the lexicographically smaller id."""
    id: str = ""
    user1_id: str = ""
    user2_id: str = ""

    @classmethod
    def from_dict(cls, doc_id, data):
        data = data or {}
        return cls(
            id=data.get("id") or doc_id,
            user1_id=data.get("user1Id", ""),
            user2_id=data.get("user2Id", ""),
        )

    def to_dict(self):
        return {"id": self.id, "user1Id": self.user1_id, "user2Id": self.user2_id}


@dataclass
class Like:
    id: str = ""
    photo_id: str = ""
    user_id: str = ""

    @classmethod
    def from_dict(cls, doc_id, data):
        data = data or {}
        return cls(
            id=data.get("id") or doc_id,
            photo_id=data.get("photoId", ""),
            user_id=data.get("userId", ""),
        )

    def to_dict(self):
        return {"id": self.id, "photoId": self.photo_id, "userId": self.user_id}


def to_json(model):
    """Serializes a model for an API response (snake_case keys)."""
    return asdict(model)
