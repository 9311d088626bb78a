#!/usr/bin/env python3
"""Configuration validation script."""

import sys
from pathlib import Path
from typing import List, Optional

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from simon_app.config.loader import ConfigLoader
from simon_app.config.validation import ConfigValidator, ValidationError


def validate_game_config(config_dir: Optional[Path] = None) -> List[ValidationError]:
    """Validate the merged configuration found in config_dir."""
    loader = ConfigLoader.create(config_dir)
    config = loader.merge_config()
    return ConfigValidator.validate_config(config)


def main():
    """Main validation function."""
    config_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else None
    loader = ConfigLoader.create(config_dir)
    print(f"🔍 Validating game configuration in {loader.config_dir}...")

    all_valid = True

    try:
        errors = validate_game_config(config_dir)

        if errors:
            print(f"❌ Found {len(errors)} validation errors:")
            for error in errors:
                print(f"  • {error.field}: {error.message} (value: {error.value})")
            all_valid = False
        else:
            config = loader.load()
            print("✅ Configuration is valid")
            print(f"  • signals: {', '.join(config.game.signal_names)}")
            print(f"  • win level: {config.game.win_level}")
            print(f"  • high score store: {config.storage.db_path}")

    except Exception as e:
        print(f"❌ Error validating configuration: {e}")
        all_valid = False

    # Test explicit overrides
    print("\n📋 Testing explicit overrides...")
    test_overrides = {
        "game": {"win_level": 8, "echo_input": True},
        "playback": {"grace_pause": 1.0},
    }

    try:
        config = loader.merge_config(test_overrides)
        errors = ConfigValidator.validate_config(config)

        if errors:
            print("❌ Override validation failed:")
            for error in errors:
                print(f"  • {error.field}: {error.message}")
            all_valid = False
        else:
            print("✅ Override validation passed")

    except Exception as e:
        print(f"❌ Error testing overrides: {e}")
        all_valid = False

    if all_valid:
        print("\n🎉 All configuration validation passed!")
        sys.exit(0)
    else:
        print("\n❌ Configuration validation failed!")
        sys.exit(1)


if __name__ == "__main__":
    main()
