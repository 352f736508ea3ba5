from __future__ import annotations

import logging

DEFAULT_FORMAT = "%(levelname)s:%(name)s:%(message)s"
PACKAGE_LOGGER = "ductulator"


def configure_logging(
    level: int = logging.INFO,
    *,
    format: str = DEFAULT_FORMAT,
    force: bool | None = None,
    solver_level: int | None = None,
) -> None:
    """Configure root logging once.

    Call from scripts/notebooks before running solves. `force` is forwarded to
    ``logging.basicConfig`` to allow reconfiguration when running interactively.
    `solver_level` sets the ``ductulator`` logger separately, e.g. ``logging.DEBUG``
    to trace bisection and coordinate-descent iterations without flooding the root.
    """

    kwargs: dict[str, object] = {"level": level, "format": format}
    if force is not None:
        kwargs["force"] = force
    logging.basicConfig(**kwargs)
    if solver_level is not None:
        logging.getLogger(PACKAGE_LOGGER).setLevel(solver_level)


__all__ = ["configure_logging", "DEFAULT_FORMAT", "PACKAGE_LOGGER"]
