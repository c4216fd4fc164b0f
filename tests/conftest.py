import sys
import os

# Make the src layout and the root run.py importable without installing the project
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
src_path = os.path.join(project_root, 'src')
for path in (src_path, project_root):
    if path not in sys.path:
        sys.path.insert(0, path)
