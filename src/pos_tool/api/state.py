"""
Shared API state: the register served by this process.

Request handlers may run concurrently, so every access to the register goes
through `register_lock`. Coupon and rain check flags change during subtotal,
which makes even reads mutating.
"""
import threading

from ..config.settings import get_settings
from ..engine.register import Register
from ..engine.scheme_loader import SchemeLoader

settings = get_settings()
scheme_loader = SchemeLoader(settings.compiled_schemes)

register = Register(scheme_loader.build_schemes())
register_lock = threading.Lock()


def reload_register() -> tuple[Register, SchemeLoader]:
    """
    Re-read compiled schemes and replace the register with an empty one.

    The new register gets fresh scheme instances, so coupons and rain checks
    start unused. An invalid file yields a register without schemes.
    """
    global scheme_loader, register
    with register_lock:
        scheme_loader = SchemeLoader(settings.compiled_schemes)
        register = Register(scheme_loader.build_schemes())
        return register, scheme_loader
