from contextlib import contextmanager

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework.exceptions import ValidationError


@contextmanager
def domain_errors():
    """Turn a broken booking rule into a 400 {"detail": "<message>"}."""
    try:
        yield
    except DjangoValidationError as exc:
        raise ValidationError({"detail": exc.messages[0]}, code=exc.code) from exc
