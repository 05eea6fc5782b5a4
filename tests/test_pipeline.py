"""
End-to-end tests of the filtering pipeline and the command line.
"""

import logging

import numpy as np
import pytest
from PIL import Image

from sparseconv import config as cfg
from sparseconv.errors import DimensionMismatchError, ImageSaveError
from sparseconv.main import build_parser, main
from sparseconv.model.coordinate_io import read_operator, read_size, read_vector
from sparseconv.pipeline import run_pipeline


@pytest.fixture
def image_path(tmp_path):
    rng = np.random.default_rng(3)
    pixels = rng.integers(0, 256, size=(6, 5), dtype=np.uint8)
    path = tmp_path / "input.png"
    Image.fromarray(pixels).save(path)
    return path


class TestRunPipeline:

    def test_outputs_written(self, tmp_path, image_path):
        out = tmp_path / "out"
        result = run_pipeline(cfg.PipelineConfig(image_path=image_path, output_dir=out, seed=1))

        for name in (
            cfg.NOISED_IMAGE_NAME,
            cfg.SMOOTHED_IMAGE_NAME,
            cfg.SHARPENED_IMAGE_NAME,
            cfg.EDGE_DETECTION_IMAGE_NAME,
            cfg.ORIGINAL_VECTOR_NAME,
            cfg.NOISED_VECTOR_NAME,
            *cfg.OPERATOR_FILE_NAMES.values(),
        ):
            assert (out / name).exists(), name

        for name in cfg.OPERATOR_FILE_NAMES.values():
            assert read_size(out / name) == 30
        assert result.shape.size == 30

    def test_operators_and_outputs(self, tmp_path, image_path):
        result = run_pipeline(cfg.PipelineConfig(image_path=image_path, output_dir=tmp_path, seed=1))

        assert set(result.operators) == {"A1", "A2", "A3"}
        assert not result.operators["A2"].is_symmetric()
        assert result.operators["A3"].is_symmetric()
        assert set(result.outputs) == {"noised", "smoothed", "sharpened", "edges"}
        for output in result.outputs.values():
            assert output.dtype == np.uint8
            assert output.shape == (6, 5)

    def test_exported_files_match_results(self, tmp_path, image_path):
        result = run_pipeline(cfg.PipelineConfig(image_path=image_path, output_dir=tmp_path, seed=2))
        a1 = read_operator(tmp_path / cfg.OPERATOR_FILE_NAMES["A1"])
        assert set(a1.triplets()) == set(result.operators["A1"].triplets())
        np.testing.assert_allclose(
            read_vector(tmp_path / cfg.NOISED_VECTOR_NAME), result.noised.ravel(), atol=1e-6
        )

    def test_seed_makes_runs_reproducible(self, tmp_path, image_path):
        a = run_pipeline(cfg.PipelineConfig(image_path=image_path, output_dir=tmp_path / "a", seed=9))
        b = run_pipeline(cfg.PipelineConfig(image_path=image_path, output_dir=tmp_path / "b", seed=9))
        assert np.array_equal(a.noised, b.noised)
        assert np.array_equal(a.outputs["smoothed"], b.outputs["smoothed"])

    def test_explicit_generator(self, tmp_path, image_path):
        config = cfg.PipelineConfig(image_path=image_path, output_dir=tmp_path, noise_amplitude=0)
        result = run_pipeline(config, rng=np.random.default_rng(0))
        assert np.array_equal(result.noised, result.original)

    def test_logs_symmetry_report(self, tmp_path, image_path, caplog):
        with caplog.at_level(logging.INFO, logger="sparseconv"):
            run_pipeline(cfg.PipelineConfig(image_path=image_path, output_dir=tmp_path, seed=1))
        assert "A1 nonzero numbers is" in caplog.text
        assert "Check if A2 is symmetric" in caplog.text

    def test_invalid_kernel_size_writes_nothing(self, tmp_path, image_path):
        out = tmp_path / "out"
        with pytest.raises(DimensionMismatchError):
            run_pipeline(cfg.PipelineConfig(image_path=image_path, output_dir=out, kernel_size=4))
        assert not out.exists()

    def test_unwritable_image_raises(self, tmp_path, image_path):
        (tmp_path / cfg.SMOOTHED_IMAGE_NAME).mkdir()
        with pytest.raises(ImageSaveError):
            run_pipeline(cfg.PipelineConfig(image_path=image_path, output_dir=tmp_path, seed=1))


@pytest.mark.usefixtures("reset_package_logger")
class TestMain:

    def test_parser_defaults(self):
        args = build_parser().parse_args(["img.png"])
        assert args.noise_amplitude == cfg.NOISE_AMPLITUDE
        assert args.kernel_size == cfg.KERNEL_SIZE
        assert not args.parallel
        assert not args.show

    def test_main_success(self, tmp_path, image_path):
        out = tmp_path / "cli"
        assert main([str(image_path), "--output-dir", str(out), "--seed", "0", "--log-level", "WARNING"]) == 0
        assert (out / "A3.mtx").exists()

    def test_main_missing_image(self, tmp_path):
        assert main([str(tmp_path / "missing.png"), "--output-dir", str(tmp_path), "--log-level", "ERROR"]) == 1

    def test_main_writes_log_file(self, tmp_path, image_path):
        log_file = tmp_path / "run.log"
        main([str(image_path), "-o", str(tmp_path), "--log-file", str(log_file)])
        logging.getLogger("sparseconv").handlers[-1].flush()
        assert "Euclidean norm of v is" in log_file.read_text(encoding="utf-8")

    def test_main_even_kernel_size(self, tmp_path, image_path):
        out = tmp_path / "even"
        assert main([str(image_path), "-o", str(out), "--kernel-size", "4", "--log-level", "ERROR"]) == 1
        assert not (out / cfg.NOISED_IMAGE_NAME).exists()

    @pytest.mark.parametrize("size", ["0", "-3"])
    def test_main_non_positive_kernel_size(self, tmp_path, image_path, size):
        assert main([str(image_path), "-o", str(tmp_path / "out"), "--kernel-size", size, "--log-level", "ERROR"]) == 1

    def test_main_negative_noise_amplitude(self, tmp_path, image_path, caplog):
        out = tmp_path / "neg"
        with caplog.at_level(logging.ERROR, logger="sparseconv"):
            code = main([str(image_path), "-o", str(out), "--noise-amplitude", "-1", "--log-level", "ERROR"])
        assert code == 1
        assert "Noise amplitude must be non-negative" in caplog.text
        assert not out.exists()

    def test_main_directory_as_image(self, tmp_path):
        assert main([str(tmp_path), "-o", str(tmp_path / "out"), "--log-level", "ERROR"]) == 1

    def test_main_output_dir_is_a_file(self, tmp_path, image_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        assert main([str(image_path), "-o", str(blocker), "--log-level", "ERROR"]) == 1

    def test_main_output_dir_not_writable(self, tmp_path, image_path):
        out = tmp_path / "cli"
        # A directory squatting on the first image name makes the save fail
        (out / cfg.NOISED_IMAGE_NAME).mkdir(parents=True)
        assert main([str(image_path), "-o", str(out), "--log-level", "ERROR"]) == 1
