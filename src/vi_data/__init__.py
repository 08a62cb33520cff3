"""
vi_data - Data files installed alongside the ibus-vi modules

    config.json          default configuration, copied to ~/.config/ibus-vi
    layouts/telex.json   Telex trigger table
    layouts/vni.json     VNI trigger table
"""

import os

DATA_DIR = os.path.dirname(os.path.abspath(__file__))
