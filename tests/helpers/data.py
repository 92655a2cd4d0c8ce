"""Dados de exemplo do catálogo e do manual usados nos testes."""

from __future__ import annotations

MANUAL_TEXT = """Manual técnico Interlight.

Ofuscamento é o desconforto visual causado por luminâncias excessivas no campo de visão.
O índice UGR quantifica o ofuscamento: quanto menor, mais confortável.

Grau de proteção IP indica a vedação contra poeira e água. Fachadas externas pedem IP65 ou superior.

Temperatura de cor (CCT) é medida em Kelvin: 2700K é quente, 4000K é neutra.
"""

ALLINEAR_RECORD = {
    "referencia_completa": "2153.S.PM",
    "linha": "Allinear",
    "potencia_w": 10,
    "grau_de_protecao": "IP67",
}

FACHADA_RECORDS = [
    {
        "referencia_completa": "5103.PT.40",
        "linha": "Flat",
        "potencia_w": 24.0,
        "grau_de_protecao": "IP66",
        "fluxo_lum_luminaria_lm": 2100,
        "cores": "PT",
    },
    {
        "referencia_completa": "5104.PT.40",
        "linha": "Flat",
        "potencia_w": 36.0,
        "grau_de_protecao": "IP66",
        "fluxo_lum_luminaria_lm": 3200,
        "cores": "PT",
    },
]
