#!/usr/bin/env python3
"""
Setup script for ClaimIQ environment variables.
"""

import asyncio
from pathlib import Path

from main import load_env_file, load_config
from claimiq.models.llm_manager import LLMManager, StrategyMode


def setup_environment():
    """Set up environment variables for ClaimIQ."""

    print("🩺 ClaimIQ Environment Setup")
    print("=" * 50)

    env_file = Path(".env")
    if env_file.exists():
        print("✅ Found existing .env file")
        load_env_file(env_file)
    else:
        print("📝 Creating new .env file...")
        create_env_file(env_file)

    print("\n🔧 Testing LLM initialization...")
    test_llm_init()


def create_env_file(env_file: Path):
    """Create a new .env file with template values."""
    env_content = """# ClaimIQ Environment Variables
# Leave OPENAI_API_KEY empty to run with the rule-based analysis

OPENAI_API_KEY=

# Anthropic API Key (optional, used when llm.default_provider is anthropic)
ANTHROPIC_API_KEY=
"""

    with open(env_file, 'w') as f:
        f.write(env_content)

    print("✅ Created .env file")
    print("⚠️  Please edit .env file with your actual API keys")


def test_llm_init():
    """Check which analysis strategy the current configuration selects."""
    config_path = Path("config/config.yaml")
    if not config_path.exists():
        print("❌ Config file not found")
        return

    config = load_config(str(config_path))
    print("✅ Config loaded successfully")

    llm_manager = LLMManager(config)
    if llm_manager.mode is StrategyMode.HEURISTIC:
        print("ℹ️  No API key configured, claims will be analyzed with the rule-based strategy")
        return

    providers = llm_manager.get_available_providers()
    print("✅ LLM Manager initialized successfully")
    print(f"   Available providers: {providers}")

    async def test_query():
        try:
            result = await llm_manager.generate("Hello, this is a test.")
            print(f"✅ Test query successful: {result[:50]}...")
        except Exception as e:
            print(f"❌ Test query failed: {e}")
            print("\n🔧 Troubleshooting tips:")
            print("   1. Make sure you have set your API keys in .env file")
            print("   2. Check that your API keys are valid")

    asyncio.run(test_query())


if __name__ == "__main__":
    setup_environment()

    print("\n🎉 Setup complete!")
    print("\nNext steps:")
    print("1. Edit .env file with your API keys (optional)")
    print("2. Run: python main.py query '46-year-old male, knee surgery in Pune, 3-month-old insurance policy'")
    print("3. Or run: python main.py interactive")
