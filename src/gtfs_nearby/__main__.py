import sys

from gtfs_nearby.server import main

sys.exit(main())
