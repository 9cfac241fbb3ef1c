"""Browser-based dashboard for the paging simulator.

This package provides a Flask application that exposes one memory
system over HTTP.  It is an **optional** extra — install with::

    pip install py-mmu[web]

The ``create_app`` factory in ``app.py`` builds a memory system and
serves:

- ``GET /`` — HTML page with the memory geometry.
- ``POST /api/translate`` — translate one virtual address.
- ``POST /api/simulate`` — translate a batch of random addresses.
- ``GET /api/stats`` — fault and hit counters.
- ``GET /api/page-table`` — resident pages and FIFO order.
- ``GET /api/log`` — the MMU event log.
"""
