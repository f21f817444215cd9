import os
import threading
import multiprocessing
import config

LEVELS = {'DEBUG': 10, 'INFO': 20, 'WARN': 30, 'ERROR': 40}

# Chunk tags are per thread since chunks may be generated concurrently.
_local = threading.local()


def set_chunk(chunk):
    """Tag this thread's log lines with the (chunk_x, chunk_z) being generated, or None."""
    _local.chunk = chunk


def enabled(scope, level="INFO"):
    if LEVELS.get(level, 20) < LEVELS.get(getattr(config, "LOG_LEVEL", "INFO"), 20):
        return False
    if scope == "CHUNK" and not getattr(config, "LOG_CAVES", False):
        return False
    return True


def log(scope, msg, level="INFO"):
    if not enabled(scope, level):
        return
    pid = os.getpid()
    proc = multiprocessing.current_process().name
    thread = threading.current_thread().name
    chunk = getattr(_local, "chunk", None)
    chunk_tag = f" c{chunk[0]},{chunk[1]}" if chunk is not None else ""
    text = f"[{level}{chunk_tag} pid{pid} proc{proc} thr{thread} {scope}] {msg}"
    use_color = getattr(config, "LOG_COLOR", True) and os.getenv("NO_COLOR") is None
    if use_color:
        if level in ("WARN", "ERROR"):
            text = f"\x1b[31m{text}\x1b[0m"
        elif thread != "MainThread":
            # Chunk worker thread.
            text = f"\x1b[32m{text}\x1b[0m"
        elif proc != "MainProcess":
            # Loader/external process.
            text = f"\x1b[33m{text}\x1b[0m"
    print(text)
