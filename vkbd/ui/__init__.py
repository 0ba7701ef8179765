"""Host UI pieces: element model, candidate box and the PyQt5 wiring (``qt_host``)."""
