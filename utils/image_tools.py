# utils/image_tools.py

from PIL import Image, ExifTags, UnidentifiedImageError
from io import BytesIO

ORIENTATION_TAG = next(key for key, val in ExifTags.TAGS.items() if val == "Orientation")


def compress_image_bytes(
    data: bytes,
    quality: int = 85
) -> tuple[bytes, str]:
    """
    Re-encodes an uploaded image for the feed:
    - Opens any format Pillow supports.
    - Applies the EXIF orientation, then drops EXIF metadata.
    - Converts to RGB to drop the alpha channel.
    - Keeps WebP as WebP, everything else becomes progressive JPEG.

    Returns (compressed_bytes, ext) where ext is "webp" or "jpg".
    Raises ValueError when the bytes are not an image.
    """
    try:
        img = Image.open(BytesIO(data))
        img.load()
    except (UnidentifiedImageError, OSError):
        raise ValueError("Unsupported file: not an image")

    # format is lost after rotate/convert
    orig_fmt = (img.format or "JPEG").upper()

    orientation = img.getexif().get(ORIENTATION_TAG)
    if orientation == 3:
        img = img.rotate(180, expand=True)
    elif orientation == 6:
        img = img.rotate(270, expand=True)
    elif orientation == 8:
        img = img.rotate(90, expand=True)

    img.info.pop("exif", None)

    if img.mode not in ("RGB", "L"):
        img = img.convert("RGB")

    buf = BytesIO()

    if orig_fmt == "WEBP":
        img.save(buf, "WEBP", quality=quality, optimize=True)
        ext = "webp"
    else:
        img.save(buf, "JPEG", quality=quality, optimize=True, progressive=True)
        ext = "jpg"

    return buf.getvalue(), ext
