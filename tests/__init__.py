"""
Test suite for XR News Bot

Unit and integration tests for the RSS digest pipeline and its Discord shells.
Tests are organized to mirror the source code structure in src/.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import sys
import os

# Add src directory to Python path so tests can import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src')))
