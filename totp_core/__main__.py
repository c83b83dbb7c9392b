import sys

from .otp_cli import main

sys.exit(main())
