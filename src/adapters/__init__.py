"""Pack/unpack adapters.

Importing this package registers the numpy array adapter.
"""

import numpy as np

from adapters.ndarray_adapter import NdarrayAdapter
from adapters.protocol import register_adapter

register_adapter(np.ndarray, NdarrayAdapter())
