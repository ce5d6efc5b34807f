"""Entry point for the BIG-IP IPAM Operator."""

import subprocess
import sys


def main():
    """Run the operator using kopf."""
    subprocess.run(
        [
            sys.executable,
            "-m",
            "kopf",
            "run",
            "--standalone",
            "--all-namespaces",
            "-m",
            "bigip_ipam_operator.operator",
        ],
        check=True,
    )


if __name__ == "__main__":
    main()
