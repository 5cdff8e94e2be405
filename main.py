"""Face Recognition Processor - recognise faces in a directory of frames."""
import argparse
import logging
import sys

from core.config import AppConfig
from core.exceptions import FaceProcessorError
from processor import REL_SUCCESS, DirectorySession, FaceRecognitionProcessor
from recognition import ModelLoadError, ModelNotFoundError

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Recognise the faces in every image of a directory."
    )
    parser.add_argument(
        "--config", default="config/processor.yaml",
        help="Path to processor config YAML (default: config/processor.yaml)",
    )
    parser.add_argument("--input", required=True, help="Directory of frames to recognise")
    parser.add_argument("--training-set", help="Override processor.training_set")
    parser.add_argument(
        "--algorithm", choices=["Fisher", "Eigen", "LBPH"],
        help="Override processor.algorithm",
    )
    parser.add_argument("--output-dir", help="Override processor.output_directory")
    parser.add_argument(
        "--no-save-images", action="store_true",
        help="Do not save recognised frames",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> AppConfig:
    """Load the YAML config and apply command line overrides."""
    config = AppConfig.from_yaml(args.config)
    if args.training_set:
        config.set("processor.training_set", args.training_set)
    if args.algorithm:
        config.set("processor.algorithm", args.algorithm)
    if args.output_dir:
        config.set("processor.output_directory", args.output_dir)
    if args.no_save_images:
        config.set("processor.save_images", False)
    return config


def main(argv=None) -> int:
    """Main entry point for the face recognition processor."""
    args = parse_args(argv)
    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        config = build_config(args)
        session = DirectorySession(args.input)
        processor = FaceRecognitionProcessor(config)
        processor.on_scheduled()
    except (FaceProcessorError, ModelLoadError, ModelNotFoundError, FileNotFoundError, ValueError) as e:
        logger.error(f"Processor setup failed: {e}")
        return 1

    processor.run(session)

    for item, relationship in session.results():
        filename = item.attributes.get("filename", str(item.id))
        if relationship == REL_SUCCESS:
            name = item.attributes.get(FaceRecognitionProcessor.NAME_ATTRIBUTE, "")
            print(
                f"{filename}: label={item.attributes[FaceRecognitionProcessor.LABEL_ATTRIBUTE]} "
                f"confidence={item.attributes[FaceRecognitionProcessor.CONFIDENCE_ATTRIBUTE]} {name}".rstrip()
            )
        else:
            print(f"{filename}: error={item.attributes[FaceRecognitionProcessor.ERROR_ATTRIBUTE]}")

    processor.on_stopped()
    return 0


if __name__ == "__main__":
    sys.exit(main())
