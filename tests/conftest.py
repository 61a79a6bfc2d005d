import os
import tempfile

# keep logs/settings written during the tests out of the real user profile
os.environ["XDG_CONFIG_HOME"] = tempfile.mkdtemp(prefix="greenhouse_calc_tests_")
os.environ["APPDATA"] = os.environ["XDG_CONFIG_HOME"]
