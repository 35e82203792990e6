import logging

import uvicorn
from mealcart.api.api_run import app
from mealcart.utilities.config import APP_HOST, APP_PORT, DEBUG
from mealcart.utilities.network import server_urls


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.DEBUG if DEBUG else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    urls = server_urls(APP_HOST, APP_PORT)
    print(f"Uvicorn running on {urls[0]} (Press CTRL+C to quit)")
    # Devices on the same network can use the LAN address
    for url in urls[1:]:
        print(f"Accessible from other devices at: {url}")
    uvicorn.run(app, host=APP_HOST, port=APP_PORT)
