import sys

from otp_codec.cli import main

sys.exit(main())
