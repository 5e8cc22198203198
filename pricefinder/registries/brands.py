BRANDS: tuple[str, ...] = (
    # kitchen & small appliances
    "KitchenAid", "Cuisinart", "Hamilton Beach", "Ninja", "Instant Pot", "Breville",
    "Oster", "Vitamix", "Keurig", "Mr. Coffee", "Black+Decker", "Black & Decker",
    "Crock-Pot", "Calphalon", "Le Creuset", "Lodge", "All-Clad", "T-fal", "Smeg",
    "De'Longhi", "Nespresso", "Sunbeam", "Chefman", "Zojirushi",
    # major appliances
    "Whirlpool", "GE", "GE Appliances", "Samsung", "LG", "Frigidaire", "Maytag",
    "Bosch", "Kenmore", "Amana", "Electrolux", "Haier", "Insignia", "Danby",
    "Galanz", "Midea", "Hisense",
    # electronics
    "Apple", "Sony", "Panasonic", "Vizio", "TCL", "Dell", "HP", "Lenovo", "Asus",
    "Acer", "Microsoft", "Google", "Canon", "Nikon", "Bose", "JBL", "Logitech",
    "Roku", "Amazon Basics", "Nintendo", "Garmin", "Fitbit", "Sonos",
    # cleaning
    "Dyson", "Shark", "Bissell", "Hoover", "iRobot", "Eureka", "Libman", "O-Cedar",
    "Swiffer", "Rubbermaid", "Tineco",
    # storage & home
    "Sterilite", "Iris", "Mainstays", "Better Homes & Gardens", "Hefty", "Room Essentials",
    "OXO", "Simplehuman", "Umbra", "mDesign", "ClosetMaid", "Honey-Can-Do",
    # furniture & mattresses
    "IKEA", "Ashley", "Sauder", "Zinus", "Casper", "Tempur-Pedic", "Sealy", "Serta",
    "La-Z-Boy", "Pottery Barn", "West Elm", "Novogratz", "DHP", "Christopher Knight",
    # outdoor & tools
    "Igloo", "Coleman", "YETI", "RTIC", "Weber", "Traeger", "Char-Broil", "Pit Boss",
    "Suncast", "Keter", "DeWalt", "Milwaukee", "Makita", "Ryobi", "Craftsman",
    "Stanley", "Husky", "Kobalt", "Greenworks", "EGO", "Toro", "Honda", "Scotts",
    # lighting
    "Philips", "Hampton Bay", "Lithonia", "Feit Electric", "Sylvania", "Globe Electric",
    # sports & outdoor recreation
    "Schwinn", "Huffy", "Bowflex", "NordicTrack", "Peloton", "Wilson", "Spalding",
    "Columbia", "Patagonia", "The North Face", "Nike", "Adidas", "Reebok", "Under Armour",
    # kids
    "Graco", "Chicco", "Fisher-Price", "LEGO", "Little Tikes", "Step2",
    # luxury (used by exclusion rules and brand conflicts)
    "Louis Vuitton", "Gucci", "Chanel", "Hermes", "Prada", "Rolex", "Cartier", "Coach",
    "Michael Kors",
)

BRAND_TYPOS: dict[str, str] = {
    "rebook": "reebok",
    "adiddas": "adidas",
    "adidsa": "adidas",
    "nkie": "nike",
    "nikey": "nike",
    "samsang": "samsung",
    "whirpool": "whirlpool",
    "fridgidaire": "frigidaire",
    "soni": "sony",
    "colmbia": "columbia",
    "patgonia": "patagonia",
    "kitchen aid": "kitchenaid",
    "cuisnart": "cuisinart",
    "hamilton-beach": "hamilton beach",
    "rubbermade": "rubbermaid",
    "sterlite": "sterilite",
    "bissel": "bissell",
    "dysen": "dyson",
}

# Comparable brands searched when the exact item is unavailable.
ALTERNATE_BRANDS: dict[str, tuple[str, ...]] = {
    "stand mixer": ("Cuisinart", "Hamilton Beach"),
    "hand mixer": ("Hamilton Beach", "Cuisinart"),
    "blender": ("Ninja", "Oster"),
    "coffee maker": ("Cuisinart", "Mr. Coffee"),
    "toaster": ("Cuisinart", "Hamilton Beach"),
    "toaster oven": ("Cuisinart", "Black+Decker"),
    "air fryer": ("Ninja", "Chefman"),
    "slow cooker": ("Crock-Pot", "Hamilton Beach"),
    "pressure cooker": ("Instant Pot", "Ninja"),
    "microwave": ("Panasonic", "Galanz"),
    "refrigerator": ("Whirlpool", "Frigidaire"),
    "mini fridge": ("Danby", "Insignia"),
    "washer": ("Whirlpool", "LG"),
    "dryer": ("Whirlpool", "Samsung"),
    "dishwasher": ("Bosch", "Whirlpool"),
    "vacuum": ("Shark", "Bissell"),
    "robot vacuum": ("Shark", "iRobot"),
    "storage bin": ("Sterilite", "Iris"),
    "storage tote": ("Sterilite", "Rubbermaid"),
    "cooler": ("Coleman", "Igloo"),
    "grill": ("Weber", "Char-Broil"),
    "tv": ("TCL", "Vizio"),
    "television": ("TCL", "Vizio"),
    "laptop": ("Lenovo", "HP"),
    "headphones": ("Sony", "JBL"),
    "mattress": ("Zinus", "Sealy"),
    "office chair": ("Sauder", "Amazon Basics"),
    "drill": ("Ryobi", "DeWalt"),
    "lawn mower": ("Greenworks", "Toro"),
}

LUXURY_BRANDS: tuple[str, ...] = (
    "louis vuitton", "gucci", "chanel", "hermes", "hermès", "prada", "rolex",
    "cartier", "dior", "fendi", "balenciaga", "burberry", "omega", "tiffany",
    "bottega veneta", "saint laurent", "ysl", "givenchy", "patek philippe",
    "audemars piguet", "goyard", "celine", "valentino", "versace",
)
