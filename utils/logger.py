# logger.py
import os, logging
from contextvars import ContextVar

_SAMPLE_I = ContextVar("sample_i", default=-1)

LOGGER_NAMES = [
    "main",
    "controller",
    "fuzzifier",
    "rule_engine",
    "defuzzifier",
    "readings",
    "replay",
]


def set_sample_index(i: int) -> None:
    _SAMPLE_I.set(int(i))


class SampleIndexFilter(logging.Filter):
    def filter(self, record):
        # every record carries .i, the index of the reading being scored
        record.i = _SAMPLE_I.get()
        return True


def setup_logging(
    log_dir: str = "logs",
    overwrite: bool = True,
    log_level: int = logging.DEBUG,
    console_level: int = logging.INFO,
) -> None:
    os.makedirs(log_dir, exist_ok=True)
    fmt = logging.Formatter("%(i)06d | %(levelname)s | %(name)s | %(message)s")

    console = logging.StreamHandler()
    console.setFormatter(fmt)
    console.setLevel(console_level)
    console.addFilter(SampleIndexFilter())

    for name in LOGGER_NAMES:
        log = logging.getLogger(name)
        log.setLevel(log_level)
        log.propagate = False
        for h in list(log.handlers):
            log.removeHandler(h)
            h.close()

        mode = "w" if overwrite else "a"
        fh = logging.FileHandler(os.path.join(log_dir, f"{name}.log"), mode=mode, encoding="utf-8")
        fh.setFormatter(fmt)
        fh.setLevel(log_level)
        fh.addFilter(SampleIndexFilter())
        log.addHandler(fh)

    # console only for "main"
    logging.getLogger("main").addHandler(console)
    logging.getLogger("main").info("Logging system initialized.")
