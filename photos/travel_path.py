# photos/travel_path.py
from geopy.distance import geodesic


def has_location(photo):
    # (0, 0) is what the device stores when it had no fix
    return not (photo.latitude == 0.0 and photo.longitude == 0.0)


def build_travel_path(photos):
    """
    Orders a trip's photos by capture time and returns the path they trace:
    the points in order plus the total geodesic distance in kilometres.
    """
    ordered = sorted((p for p in photos if has_location(p)), key=lambda p: p.timestamp)
    points = [
        {
            "photo_id": p.id,
            "lat": p.latitude,
            "lng": p.longitude,
            "timestamp": p.timestamp,
            "image_url": p.image_url,
        }
        for p in ordered
    ]

    distance_km = 0.0
    for prev, curr in zip(ordered, ordered[1:]):
        distance_km += geodesic((prev.latitude, prev.longitude), (curr.latitude, curr.longitude)).km

    return {
        "points": points,
        "point_count": len(points),
        "distance_km": round(distance_km, 2),
    }
