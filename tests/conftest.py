import os

# Headless backend for the matplotlib report
os.environ.setdefault('MPLBACKEND', 'Agg')
