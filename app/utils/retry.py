import logging
import time

logger = logging.getLogger(__name__)


def retry(fn, *, attempts=3, base_delay=0.05, exc=(Exception,)):
    """
    Reintenta fn() hasta `attempts` veces.
    Entre intentos espera un 'backoff' exponencial: base, 2*base, 4*base, ...
    - fn: función sin argumentos (p.ej. lambda: service._create_once(data))
    - attempts: cuántos intentos en total (p.ej. 3)
    - base_delay: segundos de espera inicial
    - exc: tupla de tipos de excepción que deben activar el retry
    """
    for i in range(attempts):
        try:
            return fn()
        except exc as e:
            if i == attempts - 1:
                raise
            logger.warning("Reintento %s/%s tras %s: %s", i + 1, attempts - 1, type(e).__name__, e)
            time.sleep(base_delay * (2 ** i))
