"""Fuente unica de curvas, colores y tabla de distribucion por talla."""

from __future__ import annotations

CURVA_OPTIONS: tuple[str, ...] = (
    "XS-S-M-L-XL",
    "S-M-L-XL",
    "S-M-L",
    "XL-XXL-XXXL",
    "XL-XXL-3XL",
    "28-30-32-34-36",
    "28-30-32-34-36-40",
    "06-08-10-12-14",
    "14-16-18-20",
    "14-16-18-20-22",
    "ONE-SIZE",
)

CURVA_LABELS: dict[str, str] = {curva: curva for curva in CURVA_OPTIONS}
CURVA_LABELS["ONE-SIZE"] = "Talla Única"

UN_COLOR = "1 color"
DOS_COLORES = "2 colores"
CANTIDAD_COLORES_OPTIONS: tuple[str, ...] = (UN_COLOR, DOS_COLORES)

COLOR_OPTIONS: tuple[str, ...] = (
    "Rojo", "Vino Tinto", "Verde Militar", "Negro", "Rosa", "Azul Claro", "Camuflado",
    "Azul Medio", "Azul Oscuro", "Hielo", "Amarillo", "Café", "Gris Claro", "Gris Oscuro",
    "Blanco", "Beige", "Kaki", "Mandarina", "Arena", "Marfil", "Verde", "Morado", "Mostaza",
    "Crema", "Dorado", "Plateado", "Cereza", "Fucsia", "Azul Rey", "Berenjena", "Terracota",
    "Salmon", "Verde Claro", "Naranja", "Melon", "Semilla", "Gris Medio", "Caramelo",
    "Avellana", "Ocre", "Carmel", "Guayaba", "Agua Marina", "Verde Jade", "Coral",
    "Verde Menta", "Ladrillo", "Magenta", "Macadamia", "Champaña", "Canela", "Verde Oliva",
    "Bambu", "Azul Turqueza", "Tabaco", "Camel", "Mora", "Orquidea", "Pink", "Almendra",
    "Fucsia Neon", "Naranja Neon", "Verde Neon", "Malva", "Natural", "Verde Manzana",
    "Confite", "Esmeralda", "Lima", "Azul", "Hortensia", "Pistacho", "Celeste", "Lila",
    "Turquesa", "Marron", "Verde Esmeralda", "Ivory", "Durazno", "Rubor", "Avena", "Taupe",
    "Verde Limon", "Mocca", "Cocoa", "Nude", "Curcuma", "Verde Botella", "Gris",
    "Azul Cobalto", "Vainilla", "Palo De Rosa", "Lavanda", "Chocolate", "Navy",
    "Azul Petroleo", "Matcha", "Piton Canela", "Cebra", "Piton Almendra", "Azul Nube",
    "Estampado", "Cacao", "Pardo", "Dirty", "Rosa Pastel", "Plomo", "Animal Print",
    "Animal Print Chocolate", "Animal Print Kaki", "Animal Print Negro", "Animal Print Almendra",
    "Animal Print Blanco", "Animal Print Camel", "Animal Print Ivory", "Animal Print Beige",
    "Animal Print Avena", "Animal Print Gris", "Animal Print Marron", "Cebra Negro",
    "Cebra Beige", "Cebra Kaki", "Cebra Marron", "Cebra Almendra",
)

# cantidad de colores -> curva -> (distribucion por talla, total de unidades)
DISTRIBUTION_TABLE: dict[str, dict[str, tuple[str, int]]] = {
    UN_COLOR: {
        "XS-S-M-L-XL": ("3-4-4-4-3", 18),
        "S-M-L-XL": ("5-4-4-5", 18),
        "S-M-L": ("6-6-6", 18),
        "XL-XXL-XXXL": ("6-6-6", 18),
        "XL-XXL-3XL": ("6-6-6", 18),
        "28-30-32-34-36": ("3-4-4-4-3", 18),
        "28-30-32-34-36-40": ("3-3-3-3-3-3", 18),
        "06-08-10-12-14": ("3-4-4-4-3", 18),
        "14-16-18-20": ("5-4-4-5", 18),
        "14-16-18-20-22": ("3-4-4-4-3", 18),
        "ONE-SIZE": ("50", 50),
    },
    DOS_COLORES: {
        "XS-S-M-L-XL": ("2-4-8-4-2", 20),
        "S-M-L-XL": ("4-6-6-4", 20),
        "S-M-L": ("6-8-6", 20),
        "XL-XXL-XXXL": ("6-8-6", 20),
        "XL-XXL-3XL": ("6-8-6", 20),
        "28-30-32-34-36": ("2-4-8-4-2", 20),
        "28-30-32-34-36-40": ("2-4-4-4-4-2", 20),
        "06-08-10-12-14": ("2-4-8-4-2", 20),
        "14-16-18-20": ("4-6-6-4", 20),
        "14-16-18-20-22": ("2-4-8-4-2", 20),
        "ONE-SIZE": ("50-50", 100),
    },
}


def curva_label(curva: str) -> str:
    """Retorna la etiqueta visible de una curva."""
    return CURVA_LABELS.get(curva, curva)


def build_color_value(
    cantidad_colores: str | None,
    color: str | None,
    color2: str | None = None,
) -> str | None:
    """Combina color principal y secundario en el valor que se guarda."""
    primary = (color or "").strip()
    secondary = (color2 or "").strip()

    if cantidad_colores == DOS_COLORES and primary and secondary:
        return f"{primary}, {secondary}"
    if primary:
        return primary
    return None


def split_color_value(value: str | None) -> list[str]:
    """Separa un valor de color guardado en sus colores individuales."""
    normalized: list[str] = []
    seen: set[str] = set()

    for raw_color in (value or "").split(","):
        color = raw_color.strip()
        if not color or color in seen:
            continue
        seen.add(color)
        normalized.append(color)

    return normalized
