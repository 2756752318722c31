from . import crud_event
from . import crud_package
from . import crud_breakdown
from . import crud_pricing
from . import crud_tracking
from .base import storage_errors
