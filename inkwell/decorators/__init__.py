from inkwell.decorators.metrics import timed
from inkwell.decorators.with_retry import with_retry

__all__ = ["timed", "with_retry"]
