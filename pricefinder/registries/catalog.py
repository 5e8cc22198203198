"""Product-type taxonomy, attribute keyword tables and baseline price ranges."""

# product type -> (category, subcategory)
PRODUCT_TYPES: dict[str, tuple[str, str]] = {
    # kitchen / small appliances
    "stand mixer": ("kitchen", "small appliance"),
    "hand mixer": ("kitchen", "small appliance"),
    "mixer": ("kitchen", "small appliance"),
    "blender": ("kitchen", "small appliance"),
    "food processor": ("kitchen", "small appliance"),
    "coffee maker": ("kitchen", "small appliance"),
    "espresso machine": ("kitchen", "small appliance"),
    "toaster oven": ("kitchen", "small appliance"),
    "toaster": ("kitchen", "small appliance"),
    "air fryer": ("kitchen", "small appliance"),
    "slow cooker": ("kitchen", "small appliance"),
    "pressure cooker": ("kitchen", "small appliance"),
    "rice cooker": ("kitchen", "small appliance"),
    "electric kettle": ("kitchen", "small appliance"),
    "kettle": ("kitchen", "cookware"),
    "cookware set": ("kitchen", "cookware"),
    "dutch oven": ("kitchen", "cookware"),
    "skillet": ("kitchen", "cookware"),
    "frying pan": ("kitchen", "cookware"),
    "knife set": ("kitchen", "cutlery"),
    "dinnerware set": ("kitchen", "dinnerware"),
    "cutting board": ("kitchen", "prep"),
    # major appliances
    "refrigerator": ("appliance", "major appliance"),
    "french door refrigerator": ("appliance", "major appliance"),
    "mini fridge": ("appliance", "compact appliance"),
    "chest freezer": ("appliance", "major appliance"),
    "freezer": ("appliance", "major appliance"),
    "microwave": ("appliance", "small appliance"),
    "dishwasher": ("appliance", "major appliance"),
    "washer": ("appliance", "laundry"),
    "washing machine": ("appliance", "laundry"),
    "dryer": ("appliance", "laundry"),
    "range": ("appliance", "major appliance"),
    "oven": ("appliance", "major appliance"),
    "water heater": ("appliance", "utility"),
    "dehumidifier": ("appliance", "climate"),
    "humidifier": ("appliance", "climate"),
    "air conditioner": ("appliance", "climate"),
    "space heater": ("appliance", "climate"),
    "fan": ("appliance", "climate"),
    "sewing machine": ("appliance", "small appliance"),
    # electronics
    "tv": ("electronics", "television"),
    "television": ("electronics", "television"),
    "laptop": ("electronics", "computer"),
    "desktop computer": ("electronics", "computer"),
    "monitor": ("electronics", "computer"),
    "tablet": ("electronics", "mobile"),
    "phone": ("electronics", "mobile"),
    "smartphone": ("electronics", "mobile"),
    "headphones": ("electronics", "audio"),
    "soundbar": ("electronics", "audio"),
    "speaker": ("electronics", "audio"),
    "camera": ("electronics", "camera"),
    "game console": ("electronics", "gaming"),
    "printer": ("electronics", "computer"),
    "router": ("electronics", "networking"),
    # furniture
    "sofa": ("furniture", "living room"),
    "couch": ("furniture", "living room"),
    "sectional": ("furniture", "living room"),
    "recliner": ("furniture", "living room"),
    "coffee table": ("furniture", "living room"),
    "end table": ("furniture", "living room"),
    "tv stand": ("furniture", "living room"),
    "bookshelf": ("furniture", "storage furniture"),
    "bookcase": ("furniture", "storage furniture"),
    "dresser": ("furniture", "bedroom"),
    "nightstand": ("furniture", "bedroom"),
    "bed frame": ("furniture", "bedroom"),
    "headboard": ("furniture", "bedroom"),
    "dining table": ("furniture", "dining"),
    "dining chair": ("furniture", "dining"),
    "bar stool": ("furniture", "dining"),
    "office chair": ("furniture", "office"),
    "desk": ("furniture", "office"),
    "chair": ("furniture", "seating"),
    "table": ("furniture", "tables"),
    "mattress": ("bedding", "mattress"),
    "comforter": ("bedding", "bedding"),
    "pillow": ("bedding", "bedding"),
    "sheet set": ("bedding", "bedding"),
    # storage
    "storage bin": ("storage", "bins"),
    "storage tote": ("storage", "bins"),
    "storage box": ("storage", "bins"),
    "storage cabinet": ("storage", "cabinets"),
    "storage shelf": ("storage", "shelving"),
    "shelving unit": ("storage", "shelving"),
    "laundry hamper": ("storage", "laundry"),
    "hamper": ("storage", "laundry"),
    "basket": ("storage", "baskets"),
    "shoe rack": ("storage", "closet"),
    "closet organizer": ("storage", "closet"),
    "tool box": ("storage", "garage"),
    "toolbox": ("storage", "garage"),
    # lighting
    "floor lamp": ("lighting", "lamps"),
    "table lamp": ("lighting", "lamps"),
    "desk lamp": ("lighting", "lamps"),
    "lamp": ("lighting", "lamps"),
    "ceiling fan": ("lighting", "ceiling"),
    "chandelier": ("lighting", "ceiling"),
    "pendant light": ("lighting", "ceiling"),
    "light bulb": ("lighting", "bulbs"),
    "string lights": ("lighting", "decorative"),
    # cleaning
    "robot vacuum": ("cleaning", "vacuums"),
    "stick vacuum": ("cleaning", "vacuums"),
    "vacuum cleaner": ("cleaning", "vacuums"),
    "vacuum": ("cleaning", "vacuums"),
    "carpet cleaner": ("cleaning", "vacuums"),
    "steam mop": ("cleaning", "floor care"),
    "spin mop": ("cleaning", "floor care"),
    "mop": ("cleaning", "floor care"),
    "broom": ("cleaning", "floor care"),
    "trash can": ("cleaning", "waste"),
    "bucket": ("cleaning", "supplies"),
    # outdoor
    "patio set": ("outdoor", "patio furniture"),
    "patio chair": ("outdoor", "patio furniture"),
    "patio umbrella": ("outdoor", "patio furniture"),
    "adirondack chair": ("outdoor", "patio furniture"),
    "gas grill": ("outdoor", "grills"),
    "pellet grill": ("outdoor", "grills"),
    "grill": ("outdoor", "grills"),
    "cooler": ("outdoor", "coolers"),
    "beverage cooler": ("outdoor", "coolers"),
    "tent": ("outdoor", "camping"),
    "sleeping bag": ("outdoor", "camping"),
    "camping chair": ("outdoor", "camping"),
    "lawn mower": ("outdoor", "lawn care"),
    "leaf blower": ("outdoor", "lawn care"),
    "string trimmer": ("outdoor", "lawn care"),
    "garden hose": ("outdoor", "garden"),
    "mailbox": ("outdoor", "mailboxes"),
    "deck box": ("outdoor", "storage"),
    "shed": ("outdoor", "storage"),
    # tools
    "cordless drill": ("tools", "power tools"),
    "drill": ("tools", "power tools"),
    "circular saw": ("tools", "power tools"),
    "miter saw": ("tools", "power tools"),
    "saw": ("tools", "power tools"),
    "ladder": ("tools", "ladders"),
    "tool set": ("tools", "hand tools"),
    "wrench set": ("tools", "hand tools"),
    "pressure washer": ("tools", "outdoor power"),
    "generator": ("tools", "outdoor power"),
    # decor & bath
    "rug": ("decor", "rugs"),
    "area rug": ("decor", "rugs"),
    "mirror": ("decor", "mirrors"),
    "curtains": ("decor", "window"),
    "picture frame": ("decor", "wall"),
    "wall clock": ("decor", "wall"),
    "shower curtain": ("bath", "bath"),
    "towel set": ("bath", "bath"),
    "bath towel": ("bath", "bath"),
    # sports, kids, office
    "bicycle": ("sports", "cycling"),
    "bike": ("sports", "cycling"),
    "treadmill": ("sports", "fitness"),
    "exercise bike": ("sports", "fitness"),
    "dumbbell set": ("sports", "fitness"),
    "dumbbells": ("sports", "fitness"),
    "yoga mat": ("sports", "fitness"),
    "basketball": ("sports", "team sports"),
    "stroller": ("baby", "gear"),
    "car seat": ("baby", "gear"),
    "crib": ("baby", "nursery"),
    "high chair": ("baby", "feeding"),
    "backpack": ("clothing", "bags"),
    "jacket": ("clothing", "outerwear"),
    "shoes": ("clothing", "footwear"),
    "sneakers": ("clothing", "footwear"),
    "paper shredder": ("office", "equipment"),
    "filing cabinet": ("office", "furniture"),
    "luggage": ("travel", "luggage"),
    "suitcase": ("travel", "luggage"),
    "watch": ("jewelry", "watches"),
    "handbag": ("clothing", "bags"),
}

# product type -> (low, high) typical new retail price in USD
PRICE_RANGES: dict[str, tuple[float, float]] = {
    "stand mixer": (200.0, 450.0),
    "hand mixer": (25.0, 70.0),
    "mixer": (40.0, 300.0),
    "blender": (40.0, 180.0),
    "food processor": (60.0, 220.0),
    "coffee maker": (30.0, 150.0),
    "espresso machine": (150.0, 700.0),
    "toaster": (25.0, 80.0),
    "toaster oven": (60.0, 200.0),
    "air fryer": (60.0, 160.0),
    "slow cooker": (30.0, 80.0),
    "pressure cooker": (70.0, 150.0),
    "rice cooker": (30.0, 120.0),
    "electric kettle": (25.0, 80.0),
    "cookware set": (90.0, 350.0),
    "dutch oven": (50.0, 380.0),
    "skillet": (20.0, 90.0),
    "knife set": (50.0, 250.0),
    "refrigerator": (900.0, 2500.0),
    "french door refrigerator": (1500.0, 3500.0),
    "mini fridge": (120.0, 300.0),
    "chest freezer": (200.0, 600.0),
    "microwave": (90.0, 300.0),
    "dishwasher": (450.0, 1100.0),
    "washer": (600.0, 1300.0),
    "washing machine": (600.0, 1300.0),
    "dryer": (550.0, 1200.0),
    "range": (600.0, 1800.0),
    "dehumidifier": (150.0, 300.0),
    "air conditioner": (200.0, 550.0),
    "space heater": (30.0, 120.0),
    "fan": (25.0, 90.0),
    "sewing machine": (120.0, 400.0),
    "tv": (250.0, 900.0),
    "television": (250.0, 900.0),
    "laptop": (500.0, 1300.0),
    "monitor": (150.0, 400.0),
    "tablet": (250.0, 700.0),
    "headphones": (50.0, 350.0),
    "soundbar": (100.0, 400.0),
    "speaker": (40.0, 250.0),
    "printer": (90.0, 300.0),
    "sofa": (600.0, 1800.0),
    "couch": (600.0, 1800.0),
    "sectional": (900.0, 2800.0),
    "recliner": (300.0, 900.0),
    "coffee table": (100.0, 400.0),
    "end table": (60.0, 200.0),
    "tv stand": (100.0, 350.0),
    "bookshelf": (60.0, 250.0),
    "bookcase": (60.0, 250.0),
    "dresser": (250.0, 900.0),
    "nightstand": (80.0, 250.0),
    "bed frame": (150.0, 600.0),
    "dining table": (250.0, 900.0),
    "dining chair": (60.0, 200.0),
    "office chair": (120.0, 400.0),
    "desk": (120.0, 450.0),
    "chair": (60.0, 250.0),
    "table": (100.0, 400.0),
    "mattress": (350.0, 1200.0),
    "comforter": (50.0, 180.0),
    "pillow": (15.0, 60.0),
    "storage bin": (8.0, 30.0),
    "storage tote": (10.0, 35.0),
    "storage box": (8.0, 30.0),
    "storage cabinet": (90.0, 300.0),
    "storage shelf": (40.0, 150.0),
    "shelving unit": (50.0, 180.0),
    "laundry hamper": (20.0, 60.0),
    "hamper": (20.0, 60.0),
    "basket": (12.0, 40.0),
    "shoe rack": (20.0, 70.0),
    "floor lamp": (40.0, 160.0),
    "table lamp": (30.0, 100.0),
    "desk lamp": (25.0, 80.0),
    "lamp": (30.0, 120.0),
    "ceiling fan": (100.0, 350.0),
    "chandelier": (150.0, 600.0),
    "robot vacuum": (200.0, 600.0),
    "stick vacuum": (150.0, 450.0),
    "vacuum": (120.0, 400.0),
    "vacuum cleaner": (120.0, 400.0),
    "steam mop": (60.0, 150.0),
    "spin mop": (25.0, 50.0),
    "mop": (15.0, 45.0),
    "broom": (10.0, 30.0),
    "trash can": (25.0, 120.0),
    "patio set": (300.0, 1200.0),
    "patio umbrella": (60.0, 250.0),
    "gas grill": (300.0, 900.0),
    "grill": (200.0, 700.0),
    "cooler": (40.0, 250.0),
    "tent": (80.0, 350.0),
    "lawn mower": (250.0, 600.0),
    "leaf blower": (80.0, 250.0),
    "mailbox": (30.0, 120.0),
    "deck box": (80.0, 250.0),
    "cordless drill": (80.0, 200.0),
    "drill": (60.0, 180.0),
    "circular saw": (80.0, 220.0),
    "ladder": (90.0, 300.0),
    "tool set": (50.0, 200.0),
    "pressure washer": (180.0, 450.0),
    "generator": (500.0, 1200.0),
    "rug": (60.0, 300.0),
    "area rug": (80.0, 350.0),
    "mirror": (50.0, 200.0),
    "curtains": (25.0, 80.0),
    "towel set": (30.0, 90.0),
    "bicycle": (250.0, 700.0),
    "bike": (250.0, 700.0),
    "treadmill": (600.0, 1600.0),
    "dumbbell set": (60.0, 300.0),
    "yoga mat": (20.0, 60.0),
    "stroller": (150.0, 500.0),
    "car seat": (100.0, 350.0),
    "crib": (180.0, 500.0),
    "backpack": (30.0, 120.0),
    "luggage": (100.0, 350.0),
    "suitcase": (100.0, 350.0),
}

# category -> baseline price when no product type matched a range
CATEGORY_BASE_PRICES: dict[str, float] = {
    "appliance": 450.0,
    "kitchen": 60.0,
    "electronics": 300.0,
    "furniture": 250.0,
    "bedding": 120.0,
    "storage": 25.0,
    "lighting": 70.0,
    "cleaning": 60.0,
    "outdoor": 150.0,
    "tools": 100.0,
    "decor": 60.0,
    "bath": 35.0,
    "sports": 120.0,
    "baby": 150.0,
    "clothing": 60.0,
    "office": 80.0,
    "travel": 150.0,
    "jewelry": 150.0,
}
DEFAULT_BASE_PRICE = 35.0

# Ordered longest-first at lookup time; values are price multipliers.
MATERIALS: dict[str, float] = {
    "solid wood": 1.5,
    "hardwood": 1.4,
    "oak": 1.4,
    "walnut": 1.5,
    "teak": 1.6,
    "pine": 1.1,
    "bamboo": 1.1,
    "wood": 1.2,
    "mdf": 0.9,
    "particleboard": 0.8,
    "stainless steel": 1.3,
    "cast iron": 1.2,
    "steel": 1.1,
    "aluminum": 1.1,
    "metal": 1.05,
    "iron": 1.05,
    "wrought iron": 1.2,
    "glass": 1.1,
    "tempered glass": 1.15,
    "ceramic": 1.0,
    "porcelain": 1.1,
    "marble": 1.6,
    "granite": 1.5,
    "stone": 1.3,
    "genuine leather": 1.7,
    "leather": 1.6,
    "faux leather": 1.1,
    "velvet": 1.2,
    "linen": 1.15,
    "cotton": 1.0,
    "polyester": 0.9,
    "microfiber": 0.95,
    "fabric": 1.0,
    "wicker": 1.1,
    "rattan": 1.2,
    "resin": 0.95,
    "plastic": 0.8,
    "vinyl": 0.85,
    "nylon": 0.9,
    "canvas": 0.95,
    "mesh": 0.9,
    "memory foam": 1.2,
    "foam": 0.9,
    "copper": 1.3,
    "brass": 1.3,
}

COLORS: tuple[str, ...] = (
    "black", "white", "gray", "grey", "silver", "red", "blue", "green", "yellow",
    "orange", "purple", "pink", "brown", "beige", "tan", "navy", "gold", "cream",
    "ivory", "charcoal", "teal", "espresso", "natural", "clear", "empire red",
    "onyx black", "matte black",
)

FINISHES: tuple[str, ...] = (
    "matte", "glossy", "gloss", "satin", "brushed nickel", "brushed", "polished",
    "chrome", "nickel", "oil-rubbed bronze", "bronze", "stainless", "enameled",
    "powder-coated", "distressed", "lacquered", "antique", "weathered",
)

# unit -> [(upper bound exclusive, class name), ...]; last bound is open-ended.
CAPACITY_CLASSES: dict[str, tuple[tuple[float, str], ...]] = {
    "cu_ft": ((5.0, "mini"), (23.0, "standard"), (float("inf"), "large")),
    "gal": ((2.0, "mini"), (30.0, "standard"), (float("inf"), "large")),
    "qt": ((3.5, "mini"), (7.0, "standard"), (float("inf"), "large")),
    "oz": ((12.0, "mini"), (40.0, "standard"), (float("inf"), "large")),
    "l": ((2.0, "mini"), (10.0, "standard"), (float("inf"), "large")),
    "in": ((20.0, "mini"), (60.0, "standard"), (float("inf"), "large")),
}

# size multiplier per class for the heuristic estimate
SIZE_CLASS_MULTIPLIERS: dict[str, float] = {"mini": 0.7, "standard": 1.0, "large": 1.4}
BED_SIZE_MULTIPLIERS: dict[str, float] = {
    "twin": 0.7, "twin xl": 0.75, "full": 0.9, "queen": 1.0, "king": 1.25, "california king": 1.3,
}
