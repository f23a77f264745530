# /run.py

import subprocess
import threading
import time
import os
import sys

BASE_DIR = os.path.dirname(os.path.abspath(__file__))


def run_fastapi():
  subprocess.run([sys.executable, "-m", "uvicorn", "showcase.main:app", "--host", "0.0.0.0", "--port", "8080"], cwd=BASE_DIR)

def run_streamlit():
  # Give the API a head start so the first page render finds it
  time.sleep(2)
  env = dict(os.environ, SHOWCASE_API_URL=os.getenv("SHOWCASE_API_URL", "http://127.0.0.1:8080"))
  subprocess.run([sys.executable, "-m", "streamlit", "run", "showcase/app.py", "--server.port", "5000", "--server.address", "0.0.0.0"], cwd=BASE_DIR, env=env)

if __name__ == "__main__":

  t1 = threading.Thread(target=run_fastapi)
  t2 = threading.Thread(target=run_streamlit)

  t1.start()
  t2.start()

  t1.join()
  t2.join()
