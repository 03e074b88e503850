import logging
import pprint
import sys

import remote_reader


def main() -> int:
    if len(sys.argv) < 2:
        url = input('Enter a URL to read: ').strip()
    else:
        url = sys.argv[1].strip()

    want_json = '--json' in sys.argv[2:]
    if '--debug' in sys.argv[2:]:
        logging.basicConfig(level=logging.DEBUG)

    reader = remote_reader.Reader(
        remote_reader.retry(3),
        remote_reader.timeout(10),
    )

    exit_code = 1
    try:
        if want_json:
            pprint.pprint(reader.json(url))
        else:
            content = reader.bytes(url)
            print(f'{len(content)} bytes read from {url}')
            print(content[:500].decode('utf-8', errors='replace'))
        exit_code = 0
    except remote_reader.StatusError as exc:
        print(f'Server refused the read: {exc.status}')
    except remote_reader.NoAttemptsLeftError as exc:
        print(f'Timed out {exc.attempts} times, giving up')
    except remote_reader.ReaderError as exc:
        print(f'Error reading {url}, check your network connection {exc}')

    return exit_code


if __name__ == '__main__':
    sys.exit(main())
