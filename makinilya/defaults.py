"""Default project layout and the scaffold written by `makinilya new`."""

CONFIG_PATH = "Config.yaml"
DRAFT_DIRECTORY = "draft"
CONTEXT_PATH = "Context.yaml"
OUTPUT_PATH = "out/manuscript.txt"

DEFAULT_TITLE = "Untitled"
DEFAULT_PEN_NAME = "Unknown Author"

EXAMPLE_CHAPTER = "Chapter 1"
EXAMPLE_SCENE_NAME = "Scene 1.mt"

EXAMPLE_SCENE = """Hi, my name is {{ names.mc }}.
"""

EXAMPLE_CONTEXT = """names:
  mc: Core
"""

EXAMPLE_CONFIG = """project:
  draft_directory: draft
  context_path: Context.yaml
  output_path: out/manuscript.txt

story:
  title: Untitled
  pen_name: Brutus Ellis

author:
  name: Brutus Ellis
  address_1: 2688 South Avenue
  address_2: Barangay Olympia, Makati City
  mobile_number: "+63 895 053 4757"
  email_address: brutusellis@email.com
"""
