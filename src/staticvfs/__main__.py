#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""python -m staticvfs"""

import sys

from .cli import main

sys.exit(main())
