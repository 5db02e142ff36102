# pyright: reportUnusedImport=false
import shlex
import subprocess
import sys

missing_deps_text = ''
missing_deps: list[str] = []

if sys.version_info[:2] < (3, 9):
    print('Python 3.9 or later is required to run Evergrove.')
    input('Press ENTER to exit...')
    sys.exit(1)

has_colorama = True
try:
    import colorama
except ModuleNotFoundError:
    has_colorama = False
if not has_colorama:
    missing_deps_text += ' - Colorama (colorama)\n'
    missing_deps.append('colorama')

has_opensimplex = True
try:
    import opensimplex
except ModuleNotFoundError:
    has_opensimplex = False
if not has_opensimplex:
    missing_deps_text += ' - OpenSimplex Noise (opensimplex)\n'
    missing_deps.append('opensimplex')

has_humanize = True
try:
    import humanize
except ModuleNotFoundError:
    has_humanize = False
if not has_humanize:
    missing_deps_text += ' - Humanizer (humanize)\n'
    missing_deps.append('humanize')

has_typing_extensions_410 = True
try:
    from typing_extensions import Self
except ImportError:
    has_typing_extensions_410 = False
if not has_typing_extensions_410:
    missing_deps_text += ' - typing_extensions 4.1.0 or later (typing_extensions>=4.1.0)\n'
    missing_deps.append('typing_extensions>=4.1.0')

if missing_deps:
    print('You appear to be missing the following requirements for Evergrove to run:')
    print(missing_deps_text, end='')
    yes = input('Would you like to install them? [Y/n] ')
    if not yes or yes[0].lower() == 'y':
        args = [sys.executable, '-m', 'pip', 'install', '-U'] + missing_deps
        print(shlex.join(args))
        result = subprocess.run(args)
        if result.returncode != 0:
            print('Install failed with return code', result.returncode)
            sys.exit(1)
    else:
        print('Installation cancelled.')
        sys.exit(0)

from evergrove.main import main
main()
