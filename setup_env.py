"""Post-clone environment setup helper.

Run once after creating the virtualenv and installing the project:

    python -m venv .venv && source .venv/bin/activate
    pip install -e ".[test]"
    python setup_env.py

This script:
1. Verifies all third-party imports resolve correctly.
2. Verifies the pipeline modules import.
3. Reports which reasoning backend would be selected from the current env.
"""

import sys


def verify_imports() -> None:
    print("Verifying core imports...")
    required = [
        ("requests", "requests"),
        ("feedparser", "feedparser"),
        ("bs4", "beautifulsoup4"),
        ("lxml", "lxml"),
        ("trafilatura", "trafilatura"),
        ("yfinance", "yfinance"),
        ("yaml", "PyYAML"),
        ("dotenv", "python-dotenv"),
        ("openai", "openai"),
        ("anthropic", "anthropic"),
        ("google.genai", "google-genai"),
    ]
    all_ok = True
    for mod, pkg in required:
        try:
            __import__(mod)
            print(f"  [OK] {pkg}")
        except ImportError:
            print(f"  [MISSING] {pkg}  →  run: pip install {pkg}")
            all_ok = False

    if not all_ok:
        print("\nSome packages are missing. Run:  pip install -e .")
        sys.exit(1)


def verify_pipeline_imports() -> None:
    print("\nVerifying pipeline source imports...")
    try:
        from market_reaction.providers.market import YFinanceProvider  # noqa: F401
        from market_reaction.providers.news import GoogleNewsProvider  # noqa: F401
        from market_reaction.providers.article import ArticleExtractor  # noqa: F401
        from market_reaction.providers.reasoning import ReasoningAdapter  # noqa: F401
        from market_reaction.pipeline.engine import PipelineEngine  # noqa: F401
        print("  [OK] All pipeline modules import cleanly.")
    except Exception as exc:
        print(f"  [ERROR] Pipeline import failed: {exc}")
        sys.exit(1)


def report_backend() -> None:
    print("\nChecking reasoning backend credentials...")
    from market_reaction.core.config import AISettings
    from market_reaction.providers.reasoning import select_backend

    backend = select_backend(AISettings.from_dict({}))
    if backend is None:
        print("  [WARN] No AI key in the environment — runs will stop before analysis.")
    else:
        print(f"  [OK] Runs will use the '{backend.value}' backend.")


if __name__ == "__main__":
    print("=" * 60)
    print("  Market Reaction Intelligence — Environment Setup Check")
    print("=" * 60)
    verify_imports()
    verify_pipeline_imports()
    report_backend()
    print("\n" + "=" * 60)
    print("  Setup complete. You can now run: python run_pipeline.py")
    print("=" * 60)
