"""Timeouts for report rendering."""
import os
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FuturesTimeoutError

_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="hostquote")

_REPORT_TIMEOUT_SEC = int(os.environ.get("HOSTQUOTE_REPORT_TIMEOUT_SEC", "60"))


def run_sync_with_timeout(seconds: int, func, *args, **kwargs):
    """Run sync function in a thread with timeout. Raises TimeoutError on timeout."""
    future = _executor.submit(func, *args, **kwargs)
    try:
        return future.result(timeout=seconds)
    except FuturesTimeoutError:
        future.cancel()
        raise TimeoutError(f"Operation timed out after {seconds}s")


def get_report_timeout_sec() -> int:
    return _REPORT_TIMEOUT_SEC
