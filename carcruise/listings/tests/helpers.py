from io import BytesIO
from types import SimpleNamespace

from PIL import Image
from django.core.files.uploadedfile import SimpleUploadedFile


def make_image_file(name="car.png", size=(64, 64), color=(200, 100, 50)):
    buf = BytesIO()
    Image.new("RGB", size, color).save(buf, "PNG")
    return SimpleUploadedFile(name, buf.getvalue(), content_type="image/png")


def stub_booking(status="pending", pickup_date=None, return_date=None,
                 pickup_time="10:00", return_time="10:00", **extra):
    """Booking-shaped object for rule tests that need no database."""
    return SimpleNamespace(
        status=status,
        pickup_date=pickup_date,
        return_date=return_date,
        pickup_time=pickup_time,
        return_time=return_time,
        **extra,
    )
