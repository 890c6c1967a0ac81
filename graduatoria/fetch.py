import requests

from .config import FETCH_TIMEOUT, RESULTS_URL, UNIVERSITIES_URL


class FetchError(Exception):
    """Remote feed could not be downloaded (retry from the caller)."""


def fetch_json(url, timeout=FETCH_TIMEOUT, verbose=False):
    if verbose:
        print(f"🔄 Scarico {url} ...")
    try:
        response = requests.get(url, timeout=timeout)
    except requests.RequestException as e:
        raise FetchError(f"Errore di rete su {url}: {e}") from e

    if response.status_code != 200:
        raise FetchError(f"{url} ha risposto {response.status_code}")

    try:
        payload = response.json()
    except ValueError as e:
        raise FetchError(f"Risposta non JSON da {url}") from e

    if verbose:
        size = len(payload) if hasattr(payload, '__len__') else '?'
        print(f"✅ {url}: {size} elementi")
    return payload


def fetch_results(url=RESULTS_URL, timeout=FETCH_TIMEOUT, verbose=False):
    return fetch_json(url, timeout=timeout, verbose=verbose)


def fetch_universities(url=UNIVERSITIES_URL, timeout=FETCH_TIMEOUT, verbose=False):
    return fetch_json(url, timeout=timeout, verbose=verbose)
