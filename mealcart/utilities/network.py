import socket

"""Helpers for the startup banner in `mealcart.main`."""


def get_local_ip() -> str:
    """Return the LAN address the OS would use for outbound traffic, or '127.0.0.1'.

    Connecting a UDP socket sends nothing; it only makes the OS pick a source interface.
    """
    s = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        s.connect(("8.8.8.8", 80))
        return str(s.getsockname()[0])
    except OSError:
        return "127.0.0.1"
    finally:
        s.close()


def server_urls(host: str, port: int) -> list[str]:
    """URLs worth printing for a server bound to host:port; the LAN URL only when bound to all interfaces."""
    urls = [f"http://localhost:{port}"]
    if host in ("0.0.0.0", "::"):
        local_ip = get_local_ip()
        if local_ip not in ("127.0.0.1", "localhost"):
            urls.append(f"http://{local_ip}:{port}")
    return urls
