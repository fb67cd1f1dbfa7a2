"""Contains the name for the logger of FormulaKit modules.

``formulakit`` logs through the
`Logging <https://docs.python.org/3/library/logging.html>`__ standard library.
Messages are grouped in different levels:

* ``DEBUG``: Evaluation bookkeeping, e.g. a node marked as not differentiable
    or a pass that was cancelled by a newer one.
* ``WARNING``: An indication that something unexpected
    happened which may require attention.

By default, only messages of level ``WARNING`` are displayed.

Calling applications can configure the format and log level of the displayed messages
by `Configuring Logging <https://docs.python.org/3/howto/logging.html#configuring-logging>`__
for ``formulakit.logger.formulakit_logger``, e.g.::

    >>> import logging
    >>> logging.basicConfig(
    ...     level=logging.DEBUG,
    ...     format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    ... )
"""
import logging

logger_name = "formulakit"
formulakit_logger = logging.getLogger(logger_name)
