"""Jacobian composition on small synthetic two-group fixtures."""

import numpy as np
import pytest

from ficcalib.calibration import ParameterBlock, group_jacobians, parameter_blocks, transition_matrix
from ficcalib.curves import CurveParameterSize, JacobianCalibrationMatrix
from ficcalib.math import SingularMatrixError

A = CurveParameterSize("A", 2)
B = CurveParameterSize("B", 1)
C = CurveParameterSize("C", 1)

D1 = np.array([[2.0, 0.5], [1.0, 1.0]])
CROSS = np.array([[1.0, 0.2], [0.3, 2.0]])
DIRECT = np.array([[1.0, 0.1], [0.0, 4.0]])


def test_parameter_blocks():
    blocks = parameter_blocks([A, B, C])
    assert blocks == [ParameterBlock("A", 0, 2), ParameterBlock("B", 2, 1), ParameterBlock("C", 3, 1)]
    assert blocks[0].slice == slice(0, 2)
    assert parameter_blocks([B], offset=5)[0].stop == 6


def test_first_group_is_inverse_of_direct_block():
    jacobians = group_jacobians(D1, [A], [], {})
    assert list(jacobians) == ["A"]
    np.testing.assert_allclose(jacobians["A"].matrix, np.linalg.inv(D1), atol=1e-14)
    assert [s.name for s in jacobians["A"].order] == ["A"]


def test_second_group_matches_inverse_of_block_triangular_system():
    first = group_jacobians(D1, [A], [], {})
    derivatives = np.hstack([CROSS, DIRECT])
    jacobians = group_jacobians(derivatives, [B, C], [A], first)

    full = np.zeros((4, 4))
    full[:2, :2] = D1
    full[2:, :2] = CROSS
    full[2:, 2:] = DIRECT
    expected = np.linalg.inv(full)

    assert set(jacobians) == {"A", "B", "C"}
    assert jacobians["A"] is first["A"]
    np.testing.assert_allclose(jacobians["B"].matrix, expected[2:3, :], atol=1e-14)
    np.testing.assert_allclose(jacobians["C"].matrix, expected[3:4, :], atol=1e-14)
    assert jacobians["B"].curve_names == ["A", "B", "C"]


def test_independent_group_has_zero_cross_columns():
    first = group_jacobians(D1, [A], [], {})
    derivatives = np.hstack([np.zeros((2, 2)), DIRECT])
    jacobians = group_jacobians(derivatives, [B, C], [A], first)
    np.testing.assert_allclose(jacobians["B"].curve_block("A"), 0.0)
    np.testing.assert_allclose(jacobians["C"].curve_block("A"), 0.0)


def test_transition_matrix_zero_fills_unrelated_curves():
    jac_a = JacobianCalibrationMatrix([A], np.array([[1.0, 2.0], [3.0, 4.0]]))
    jac_b = JacobianCalibrationMatrix([A, B], np.array([[0.3, 0.4, 2.0]]))
    jac_c = JacobianCalibrationMatrix([C], np.array([[5.0]]))

    transition = transition_matrix([A, B, C], {"A": jac_a, "B": jac_b, "C": jac_c})

    expected = np.array([
        [1.0, 2.0, 0.0, 0.0],
        [3.0, 4.0, 0.0, 0.0],
        [0.3, 0.4, 2.0, 0.0],
        [0.0, 0.0, 0.0, 5.0],
    ])
    np.testing.assert_allclose(transition, expected)


def test_transition_matrix_requires_previous_jacobians():
    with pytest.raises(ValueError, match="No Jacobian"):
        transition_matrix([A], {})


def test_three_groups_chain():
    first = group_jacobians(D1, [A], [], {})
    second = group_jacobians(np.hstack([CROSS[:1], DIRECT[:1, :1]]), [B], [A], first)
    # C depends on B only
    third = group_jacobians(np.array([[0.0, 0.0, 0.5, 2.0]]), [C], [A, B], second)

    full = np.zeros((4, 4))
    full[:2, :2] = D1
    full[2, :3] = [CROSS[0, 0], CROSS[0, 1], DIRECT[0, 0]]
    full[3, :] = [0.0, 0.0, 0.5, 2.0]
    expected = np.linalg.inv(full)
    np.testing.assert_allclose(third["C"].matrix, expected[3:4, :], atol=1e-14)
    # C reaches the quotes of A through B
    assert np.all(np.abs(third["C"].curve_block("A")) > 0)


def test_singular_direct_block_raises():
    with pytest.raises(SingularMatrixError):
        group_jacobians(np.array([[1.0, 1.0], [1.0, 1.0]]), [A], [], {})


def test_derivatives_shape_is_checked():
    with pytest.raises(ValueError):
        group_jacobians(np.ones((2, 3)), [A], [], {})
