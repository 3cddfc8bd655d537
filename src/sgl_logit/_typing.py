"""Shared type aliases for the sgl_logit package."""

import numpy as np
import scipy.sparse as sp

# Matrix-like inputs accepted for design and response data.
MatrixLike = np.ndarray | sp.spmatrix | sp.sparray
