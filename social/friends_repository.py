# social/friends_repository.py
import logging
from user_auth.user_store import UserStore
from travel.firestore_paths import (
    friends_col, friend_requests_col, pair_key, friend_request_id,
)
from travel.models import (
    Friends, FriendRequest, STATUS_PENDING, STATUS_ACCEPTED, STATUS_DECLINED,
)

logger = logging.getLogger(__name__)


class FriendsRepository:
    """
    Friend requests are directional (/friendRequests/{sender}_{receiver});
    friendships are not (/friends/{pair_key}). Accepted and declined
    requests are kept as history.

    Write operations return True on success and False on failure.
    """

    def __init__(self, db_instance):
        self.db = db_instance
        self.user_store = UserStore(db_instance)

    def send_friend_request(self, sender_id, receiver_id):
        if sender_id == receiver_id:
            return False
        try:
            request_id = friend_request_id(sender_id, receiver_id)
            request = FriendRequest(id=request_id, sender_id=sender_id, receiver_id=receiver_id, status=STATUS_PENDING)
            friend_requests_col(self.db).document(request_id).set(request.to_dict())
            logger.info(f"Friend request {request_id} sent")
            return True
        except Exception as e:
            logger.error(f"Error sending friend request {sender_id} -> {receiver_id}: {e}")
            return False

    def accept_friend_request(self, request):
        """Marks the request accepted and creates the friendship document."""
        try:
            friend_requests_col(self.db).document(request.id).update({'status': STATUS_ACCEPTED})

            friends_id = pair_key(request.sender_id, request.receiver_id)
            user1, user2 = sorted((request.sender_id, request.receiver_id))
            friends = Friends(id=friends_id, user1_id=user1, user2_id=user2)
            friends_col(self.db).document(friends_id).set(friends.to_dict())
            logger.info(f"Friend request {request.id} accepted, friendship {friends_id} created")
            return True
        except Exception as e:
            logger.error(f"Error accepting friend request {request.id}: {e}")
            return False

    def decline_friend_request(self, request):
        try:
            friend_requests_col(self.db).document(request.id).update({'status': STATUS_DECLINED})
            return True
        except Exception as e:
            logger.error(f"Error declining friend request {request.id}: {e}")
            return False

    def get_friend_request(self, request_id):
        try:
            doc = friend_requests_col(self.db).document(request_id).get()
            if not doc.exists:
                return None
            return FriendRequest.from_dict(doc.id, doc.to_dict())
        except Exception as e:
            logger.error(f"Error fetching friend request {request_id}: {e}")
            return None

    def get_pending_requests(self, user_id):
        """Pending requests received by user_id."""
        try:
            docs = (
                friend_requests_col(self.db)
                .where('receiverId', '==', user_id)
                .where('status', '==', STATUS_PENDING)
                .stream()
            )
            return [FriendRequest.from_dict(doc.id, doc.to_dict()) for doc in docs]
        except Exception as e:
            logger.error(f"Error fetching pending requests for {user_id}: {e}")
            return []

    def get_friend_ids(self, user_id):
        try:
            as_user1 = friends_col(self.db).where('user1Id', '==', user_id).stream()
            as_user2 = friends_col(self.db).where('user2Id', '==', user_id).stream()
            ids = [Friends.from_dict(doc.id, doc.to_dict()).user2_id for doc in as_user1]
            ids += [Friends.from_dict(doc.id, doc.to_dict()).user1_id for doc in as_user2]
            return ids
        except Exception as e:
            logger.error(f"Error fetching friend ids for {user_id}: {e}")
            return []

    def get_friends(self, user_id):
        """Profiles of user_id's friends; friends without a profile are skipped."""
        friends = []
        for friend_id in self.get_friend_ids(user_id):
            profile = self.user_store.get_user_profile(friend_id)
            if profile:
                friends.append(profile)
        return friends

    def remove_friend(self, current_user_id, friend_id):
        try:
            friends_col(self.db).document(pair_key(current_user_id, friend_id)).delete()
            return True
        except Exception as e:
            logger.error(f"Error removing friendship {current_user_id} / {friend_id}: {e}")
            return False

    def are_friends(self, user_id1, user_id2):
        try:
            return friends_col(self.db).document(pair_key(user_id1, user_id2)).get().exists
        except Exception as e:
            logger.error(f"Error checking friendship {user_id1} / {user_id2}: {e}")
            return False

    def get_pending_request_between(self, user_id1, user_id2):
        """
        Pending request in either direction, or None.
        Request ids are directional, so both ids are checked; the first
        existing document decides.
        """
        try:
            for request_id in (friend_request_id(user_id1, user_id2), friend_request_id(user_id2, user_id1)):
                doc = friend_requests_col(self.db).document(request_id).get()
                if doc.exists:
                    request = FriendRequest.from_dict(doc.id, doc.to_dict())
                    return request if request.status == STATUS_PENDING else None
            return None
        except Exception as e:
            logger.error(f"Error checking pending request {user_id1} / {user_id2}: {e}")
            return None
