import exifread

def _to_degrees(value):
    return float(value[0].num) / value[0].den + \
           float(value[1].num) / value[1].den / 60 + \
           float(value[2].num) / value[2].den / 3600

def extract_gps(image_path):
    """Returns {'latitude', 'longitude'} from the photo's EXIF GPS tags, or None."""
    with open(image_path, 'rb') as f:
        tags = exifread.process_file(f, details=False)

    if 'GPS GPSLatitude' not in tags or 'GPS GPSLongitude' not in tags:
        return None

    lat = _to_degrees(tags['GPS GPSLatitude'].values)
    lon = _to_degrees(tags['GPS GPSLongitude'].values)

    lat_ref = tags.get('GPS GPSLatitudeRef')
    lon_ref = tags.get('GPS GPSLongitudeRef')
    if lat_ref and str(lat_ref.values).upper().startswith('S'):
        lat = -lat
    if lon_ref and str(lon_ref.values).upper().startswith('W'):
        lon = -lon

    return {'latitude': lat, 'longitude': lon}
