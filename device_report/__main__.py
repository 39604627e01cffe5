import sys

from device_report.main import main

sys.exit(main())
