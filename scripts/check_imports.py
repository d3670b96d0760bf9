#!/usr/bin/env python
"""
Check that every package Agridoctor Nexus needs can be imported
Run this after installing to verify the environment
"""

import importlib
import sys

print("=" * 60)
print("Checking Python Environment")
print("=" * 60)
print(f"Python Version: {sys.version}")
print(f"Python Path: {sys.executable}")
print()

REQUIRED = [
    ("FastAPI", "fastapi"),
    ("Uvicorn", "uvicorn"),
    ("Pydantic", "pydantic"),
    ("httpx", "httpx"),
    ("OpenAI SDK", "openai"),
    ("Supabase", "supabase"),
    ("slowapi", "slowapi"),
    ("Pillow (PIL)", "PIL.Image"),
    ("NumPy", "numpy"),
    ("python-dotenv", "dotenv"),
    ("python-multipart", "multipart"),
]

# Audio output packages are only loaded when something is actually spoken
OPTIONAL = [
    ("sounddevice", "sounddevice"),
    ("edge-tts", "edge_tts"),
    ("pydub", "pydub"),
]


def check(package_name, module_name):
    try:
        importlib.import_module(module_name)
    except ImportError as e:
        print(f"❌ {package_name}: {e}")
        return False
    except OSError as e:
        # sounddevice raises OSError when PortAudio is missing
        print(f"⚠️  {package_name}: {e}")
        return False
    print(f"✅ {package_name}")
    return True


def main():
    print("=" * 60)
    print("Required packages")
    print("=" * 60)
    ok = sum(check(name, module) for name, module in REQUIRED)

    print()
    print("=" * 60)
    print("Audio output packages")
    print("=" * 60)
    audio_ok = sum(check(name, module) for name, module in OPTIONAL)

    print()
    print("=" * 60)
    print(f"Results: {ok}/{len(REQUIRED)} required, {audio_ok}/{len(OPTIONAL)} audio")
    print("=" * 60)

    if ok != len(REQUIRED):
        print("❌ Some dependencies are missing")
        print("Please run: pip install -e .")
        return 1
    if audio_ok != len(OPTIONAL):
        print("⚠️  Speech playback will be unavailable on this machine")
    print("✅ Ready. Start the server with: python -m agrinexus.main")
    return 0


if __name__ == "__main__":
    sys.exit(main())
