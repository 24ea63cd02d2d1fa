#!/usr/bin/env python3
"""Configuration validation script."""

import sys
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from trading_assistant.config.loader import ConfigLoader
from trading_assistant.config.validation import ConfigValidator
from trading_assistant.errors import ConfigurationError


def main():
    """Main validation function."""
    config_dir = sys.argv[1] if len(sys.argv) > 1 else None
    loader = ConfigLoader.create(config_dir)
    print(f"🔍 Validating trading assistant configuration in {loader.config_dir}...")

    all_valid = True

    print("\n⚙️  Validating settings.yaml...")
    errors = ConfigValidator.validate_config(loader.merge_config())
    if errors:
        print(f"❌ Found {len(errors)} validation errors:")
        for error in errors:
            print(f"  • {error.field}: {error.message} (value: {error.value})")
        all_valid = False
    else:
        try:
            loader.build_config()
            print("✅ Settings are valid")
        except ConfigurationError as e:
            print(f"❌ {e}")
            for error in e.errors:
                print(f"  • {error}")
            all_valid = False

    print("\n📊 Validating instruments.yaml...")
    try:
        registry = loader.build_instruments()
        for instrument in registry:
            market = instrument.market_class.value if instrument.market_class else "unknown"
            print(f"  {instrument.symbol:<10} {market:<10} base {instrument.base_price:g} "
                  f"tick {instrument.tick_size:g}")
        print(f"✅ {len(registry)} instruments are valid")
    except ConfigurationError as e:
        print(f"❌ {e}")
        for error in e.errors:
            print(f"  • {error}")
        all_valid = False

    if all_valid:
        print("\n🎉 All configuration validation passed!")
        sys.exit(0)
    else:
        print("\n❌ Configuration validation failed!")
        sys.exit(1)


if __name__ == "__main__":
    main()
