# src/xregister/__main__.py
import sys

from xregister.app import main

sys.exit(main())
