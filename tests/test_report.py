import math

import numpy as np
import pytest

from LBG_VQ.quant.errors import EmptyInputError, LengthMismatchError
from LBG_VQ.quant.report import (compression_ratio, image_report, index_bits,
                                  mean_squared_error, report)


def test_mse_against_itself_is_zero():
    X = np.random.RandomState(0).randint(0, 256, (50, 4))
    assert mean_squared_error(X, X) == 0.0


def test_mse_value():
    assert mean_squared_error([[0, 0], [2, 2]], [[1, 1], [2, 2]]) == 0.5


def test_mse_mismatch():
    with pytest.raises(LengthMismatchError):
        mean_squared_error([[0, 0]], [[0, 0], [1, 1]])
    with pytest.raises(LengthMismatchError):
        mean_squared_error([[0, 0], [1, 1]], [[0, 0], [1, 1, 1]])
    with pytest.raises(EmptyInputError):
        mean_squared_error([], [])


def test_index_bits():
    assert [index_bits(k) for k in (1, 2, 3, 4, 5, 16, 17)] == [1, 1, 2, 2, 3, 4, 5]


def test_compression_ratio():
    assert compression_ratio(100, 16, 4) == 8.0
    # a single codeword still costs one bit per block
    assert compression_ratio(100, 1, 4) == 32.0
    assert compression_ratio(10, 256, 1024, bits_per_component=8) == 1024.0


def test_report():
    X   = np.array([[0, 0], [2, 2]], dtype=float)
    rep = report(X, X, 2)
    assert rep.mse == 0.0 and math.isinf(rep.psnr)
    assert rep.vectors == 2 and rep.dim == 2
    assert rep.ratio == 16.0


def test_image_report_ignores_tile_padding():
    img = np.full((3, 3), 200.0)
    # one codeword, the centroid of the four zero-padded 2x2 tiles
    rec = np.array([[200, 100, 200],
                    [100,  50, 100],
                    [200, 100, 200]], dtype=float)
    rep = image_report(img, rec, 1, 2)
    assert rep.mse == pytest.approx(62500 / 9)
    assert rep.vectors == 4 and rep.dim == 4
    # 9 pixels * 8 bits over 4 one-bit indices
    assert rep.ratio == 18.0
    with pytest.raises(LengthMismatchError):
        image_report(img, rec[:2], 1, 2)


def test_compression_ratio_counts_real_samples():
    assert compression_ratio(4, 1, 4, n_components=9) == 18.0
