from typing import Any, Callable, Optional

from .gateway import ApiError, describe_error


class RequestRunner:
    """Tracks ``loading``/``error`` around one gateway call at a time.

    Each view owns its own runner; sharing one between overlapping calls
    makes the flags race.
    """

    def __init__(self):
        self.loading = False
        self.error: Optional[str] = None

    def execute(self, func: Callable[..., Any], *args, **kwargs) -> Any:
        self.loading = True
        self.error = None
        try:
            return func(*args, **kwargs)
        except ApiError as e:
            self.error = describe_error(e)
            raise
        except Exception as e:
            self.error = str(e) or e.__class__.__name__
            raise
        finally:
            self.loading = False
