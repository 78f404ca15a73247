"""Unit tests for TensorBuilder."""
from __future__ import annotations

import unittest

import numpy as np

from fakes import FakeInferenceSession
from piper_runner.application.errors import RequestAbortError, TensorBuildError
from piper_runner.application.tensor_builder import TensorBuilder, bound_inputs
from piper_runner.domain.vo.model_input import ModelInputSlot, ModelInputSpec
from piper_runner.domain.vo.phoneme import SynthesisControls


class TestTensorBuilder(unittest.TestCase):
    """Test cases for TensorBuilder."""

    def setUp(self):
        """Set up test fixtures."""
        self.spec = ModelInputSpec.from_names("input", "input_lengths", "scales")
        self.builder = TensorBuilder(self.spec)
        self.controls = SynthesisControls(speed=1.2, pitch=0.9, glottal=0.8)

    def test_shapes_and_types(self):
        """Test that buffers have the (1, N), (1,) and (3,) contract shapes."""
        tensors = self.builder.build([4, 5, 6, 7], 4, self.controls)

        self.assertEqual(tensors.ids.shape, (1, 4))
        self.assertEqual(tensors.lengths.shape, (1,))
        self.assertEqual(tensors.scales.shape, (3,))
        self.assertTrue(np.issubdtype(tensors.ids.dtype, np.integer))
        self.assertTrue(np.issubdtype(tensors.lengths.dtype, np.integer))
        self.assertEqual(tensors.scales.dtype, np.float32)

    def test_values_are_not_transformed(self):
        """Test that ids pass through unchanged and scales keep their order."""
        tensors = self.builder.build([0, 12, 3], 3, self.controls)

        self.assertEqual(tensors.ids.tolist(), [[0, 12, 3]])
        self.assertEqual(tensors.lengths.tolist(), [3])
        np.testing.assert_allclose(tensors.scales, [1.2, 0.9, 0.8], rtol=1e-6)

    def test_names_follow_declared_order(self):
        """Test that buffers are keyed by the first three declared input names."""
        spec = ModelInputSpec.of(
            [
                ModelInputSlot("x", (1, "n"), "tensor(int64)"),
                ModelInputSlot("x_len", (1,), "tensor(int64)"),
                ModelInputSlot("noise", (3,), "tensor(float)"),
                ModelInputSlot("sid", (1,), "tensor(int64)"),
            ]
        )

        tensors = TensorBuilder(spec).build([1], 1, self.controls)

        self.assertEqual([name for name, _ in tensors.items()], ["x", "x_len", "noise"])

    def test_fewer_than_three_inputs_aborts(self):
        """Test that an incomplete input declaration is fatal for the request."""
        with self.assertRaises(RequestAbortError):
            TensorBuilder(ModelInputSpec.from_names("input", "input_lengths"))
        with self.assertRaises(RequestAbortError):
            TensorBuilder(None)

    def test_empty_sequence_rejected(self):
        """Test that an empty phoneme sequence cannot be built."""
        with self.assertRaises(TensorBuildError):
            self.builder.build([], 0, self.controls)

    def test_negative_ids_rejected(self):
        """Test that negative phoneme ids are rejected."""
        with self.assertRaises(TensorBuildError):
            self.builder.build([1, -2], 2, self.controls)

    def test_fractional_ids_rejected(self):
        """Test that non-integral ids are rejected instead of truncated."""
        with self.assertRaises(TensorBuildError):
            self.builder.build([1.7, 2.0], 2, self.controls)
        with self.assertRaises(TensorBuildError):
            self.builder.build(np.array([1.0, 2.0]), 2, self.controls)

    def test_length_mismatch_rejected(self):
        """Test that the declared length must match the id count."""
        with self.assertRaises(TensorBuildError):
            self.builder.build([1, 2, 3], 2, self.controls)

    def test_describe_lists_each_input(self):
        """Test that describe renders one line per bound input."""
        lines = self.builder.build([1, 2], 2, self.controls).describe()

        self.assertEqual(len(lines), 3)
        self.assertIn("input, shape: (1, 2)", lines[0])
        self.assertIn("values: [1,2]", lines[0])

    def test_bound_inputs_releases_on_error(self):
        """Test that bindings and buffers are released when the scope raises."""
        session = FakeInferenceSession()
        tensors = self.builder.build([1, 2], 2, self.controls)

        with self.assertRaises(RuntimeError):
            with bound_inputs(session, tensors):
                self.assertEqual(len(session.bindings), 3)
                raise RuntimeError("boom")

        self.assertEqual(session.bindings, {})
        self.assertTrue(tensors.released)
        with self.assertRaises(TensorBuildError):
            tensors.items()


if __name__ == "__main__":
    unittest.main()
