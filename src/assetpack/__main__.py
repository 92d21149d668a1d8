import sys

from assetpack.main import main

sys.exit(main())
