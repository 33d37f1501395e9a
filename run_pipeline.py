"""Market reaction pipeline entry point.

Usage:
    python run_pipeline.py [config.yaml]

Loads the config, checks that a reasoning backend is configured, runs
PipelineEngine once and reports the outcome to stdout and the pipeline log.
"""

import sys
from dotenv import load_dotenv

load_dotenv()  # must precede package imports so env vars are available at module load

from market_reaction.core.config import Settings, load_config  # noqa: E402
from market_reaction.core.errors import ConfigurationError, ErrorKind  # noqa: E402
from market_reaction.core.http import classify_exception  # noqa: E402
from market_reaction.core.logger import logger  # noqa: E402
from market_reaction.pipeline.engine import PipelineEngine  # noqa: E402


def main(argv: list[str] | None = None) -> int:
    """Run the pipeline once.

    Returns 1 when the config file cannot be read, 0 otherwise. A missing
    reasoning credential stops the run before any work and also returns 0.
    """
    args = sys.argv[1:] if argv is None else argv
    config_path = args[0] if args else "config.yaml"

    try:
        settings = Settings.from_config(load_config(config_path))
    except (FileNotFoundError, ValueError, ConfigurationError) as exc:
        logger.error(f"run_pipeline: failed to load config: {exc}")
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    try:
        engine = PipelineEngine(settings)
    except ConfigurationError as exc:
        logger.error(f"run_pipeline: FAILURE: {exc}")
        return 0

    try:
        records = engine.run()
    except Exception as exc:
        if classify_exception(exc) is not ErrorKind.TRANSIENT:
            raise
        logger.warning(f"run_pipeline: ignored transient network error outside a pipeline step: {exc}")
        return 0

    print(f"SUCCESS: {len(records)} records written to {engine.output_dir}")
    logger.info(f"run_pipeline: completed — {len(records)} records → {engine.output_dir}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
