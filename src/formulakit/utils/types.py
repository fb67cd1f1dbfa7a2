"""Shared typing aliases for FormulaKit."""

from __future__ import annotations

from typing import Mapping, TypeAlias

import numpy as np

Number: TypeAlias = int | float | complex | np.number
VariableBindings: TypeAlias = Mapping[str, Number]
