import sys

from mfe_fold.scripts.predict_structure import main

if __name__ == '__main__':
    sys.exit(main())
