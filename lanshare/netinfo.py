import os
import socket
import struct

# ----------------------------
# Addresses for the startup banner
# ----------------------------

SIOCGIFADDR = 0x8915

def _get_iface_ipv4_linux(ifname: str) -> str | None:
    """Return the IPv4 address for an interface name on Linux, or None if unavailable."""
    try:
        import fcntl

        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as s:
            ifreq = struct.pack("256s", ifname.encode("utf-8")[:15])
            res = fcntl.ioctl(s.fileno(), SIOCGIFADDR, ifreq)
        return socket.inet_ntoa(res[20:24])
    except (ImportError, OSError):
        return None

def _list_interface_ipv4s() -> list[tuple[str, str]]:
    out: list[tuple[str, str]] = []
    try:
        ifnames = sorted(os.listdir("/sys/class/net"))
    except OSError:
        return out
    for ifname in ifnames:
        if ifname == "lo":
            continue
        ip = _get_iface_ipv4_linux(ifname)
        if ip and not ip.startswith("127."):
            out.append((ifname, ip))
    return out

def _guess_fallback_ip() -> str | None:
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as s:
            s.connect(("8.8.8.8", 80))  # no packets need to be sent
            ip = s.getsockname()[0]
    except OSError:
        return None
    if ip.startswith("127.") or ip == "0.0.0.0":
        return None
    return ip

def lan_ipv4() -> str:
    """First non-internal IPv4 address of this host, or 'localhost'."""
    ifaces = _list_interface_ipv4s()
    if ifaces:
        return ifaces[0][1]
    return _guess_fallback_ip() or "localhost"

def startup_urls(host: str, port: int) -> list[tuple[str, str]]:
    if host in ("0.0.0.0", "::", ""):
        lan = lan_ipv4()
    else:
        lan = host
    return [
        ("Local", f"http://localhost:{port}"),
        ("LAN", f"http://{lan}:{port}"),
    ]
