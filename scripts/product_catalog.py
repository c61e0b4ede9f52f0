"""
Static product catalog for seeding.

Sorted by price within each category, cheapest first. Equipment is sold
at one size, so each item has a single default variant. Chickens are
priced by age, one variant per age bracket.
"""

from models.product import Category, Product, Variant


def equipment(
    id: str,
    name: str,
    category: Category,
    description: str,
    retail: float,
    wholesale: float,
    image: str,
    sku: str,
    stock: int,
    unit: str = "piece",
    min_qty: int = 10,
    **specifications: str
) -> Product:
    """Single-variant product."""
    return Product(
        id=id,
        name=name,
        category=category,
        description=description,
        image_url=image,
        unit=unit,
        min_wholesale_qty=min_qty,
        variants=(
            Variant(
                id="default",
                name=name,
                sku=sku,
                wholesale_price=wholesale,
                retail_price=retail,
                in_stock=stock > 0,
                stock_quantity=stock,
            ),
        ),
        specifications=specifications,
    )


def chicks(
    id: str,
    name: str,
    description: str,
    image: str,
    sku: str,
    price_by_age: dict[str, float],
    **specifications: str
) -> Product:
    """Chicken breed with one variant per age bracket."""
    variants = []
    for age, price in price_by_age.items():
        slug = age.lower().replace(" ", "-")
        variants.append(
            Variant(
                id=slug,
                name=age,
                sku=f"{sku}-{slug.upper()}",
                wholesale_price=price,
                retail_price=price,
                in_stock=True,
                stock_quantity=0,
            )
        )
    return Product(
        id=id,
        name=name,
        category=Category.CHICKENS,
        description=description,
        image_url=image,
        unit="chick",
        min_wholesale_qty=50,
        variants=tuple(variants),
        specifications=specifications,
    )


FEEDERS = [
    equipment(
        "baby-feeder", "Baby Feeder", Category.FEEDERS,
        "Small feeder ideal for day-old chicks and young birds. Lightweight and easy to clean.",
        100, 60, "/products/feeders/baby-feeder.webp", "FEED-BABY", 300,
        capacity="Small", material="Plastic", suitable="Day-old to 2 weeks",
    ),
    equipment(
        "long-feeder-small", "Long Feeder Small", Category.FEEDERS,
        "Compact long feeder for smaller flocks. Space-efficient design.",
        100, 80, "/products/feeders/long-feeder-small.webp", "FEED-LONG-SML", 120,
        length="Small", material="Plastic", suitable="Small to medium flocks",
    ),
    equipment(
        "feeder-1-5kg", "1.5 Kg Feeder", Category.FEEDERS,
        "Compact 1.5kg capacity feeder for small poultry operations.",
        180, 150, "/products/feeders/feeder-1-5kg.webp", "FEED-1-5KG", 250,
        capacity="1.5 Kg", material="Plastic", suitable="Small flocks",
    ),
    equipment(
        "long-feeder-24-red", "Long Feeder 24 (Red)", Category.FEEDERS,
        "24-inch red long feeder. Durable and easy to spot in the coop.",
        250, 180, "/products/feeders/long-feeder-24-red.webp", "FEED-LONG-24", 80,
        length="24 inches", material="Plastic", color="Red",
    ),
    equipment(
        "feeding-tray-yellow", "Feeding Tray (Yellow)", Category.FEEDERS,
        "Round yellow feeding tray. Perfect for group feeding of chicks.",
        250, 200, "/products/feeders/feeding-tray-yellow.webp", "FEED-TRAY-YLW", 150,
        shape="Round", material="Plastic", color="Yellow",
    ),
    equipment(
        "feeder-3kg-small", "3 Kg Feeder (Small)", Category.FEEDERS,
        "3kg capacity feeder with compact design for efficient feed management.",
        350, 280, "/products/feeders/feeder-3kg-small.webp", "FEED-3KG-SML", 200,
        capacity="3 Kg", size="Small", material="Plastic",
    ),
    equipment(
        "feeder-3kg-big", "3 Kg Feeder (Big)", Category.FEEDERS,
        "3kg capacity feeder with larger design for better access.",
        380, 300, "/products/feeders/feeder-3kg-big.webp", "FEED-3KG-BIG", 180,
        capacity="3 Kg", size="Big", material="Plastic",
    ),
    equipment(
        "feeder-no2", "Feeder No.2", Category.FEEDERS,
        "Professional-grade feeder for commercial operations. Heavy-duty construction for long-lasting use.",
        400, 350, "/products/feeders/feeder-no2.webp", "FEED-NO2", 70,
        type="Professional", material="Heavy-duty plastic",
    ),
    equipment(
        "feeder-6kg", "6 Kg Feeder", Category.FEEDERS,
        "6kg capacity feeder ideal for medium-sized flocks.",
        450, 380, "/products/feeders/feeder-6kg.webp", "FEED-6KG", 200,
        capacity="6 Kg", material="Plastic", suitable="Medium flocks",
    ),
    equipment(
        "rectangular-tray", "Rectangular Feeding Tray", Category.FEEDERS,
        "Large rectangular tray feeder for chicks and easy cleaning. Prevents feed wastage.",
        450, 400, "/products/feeders/rectangular-tray.webp", "FEED-TRAY-RECT", 90,
        shape="Rectangular", material="Plastic",
    ),
    equipment(
        "feeder-10kg", "10 Kg Feeder", Category.FEEDERS,
        "10kg capacity feeder for larger flocks. Reduces refilling frequency.",
        650, 550, "/products/feeders/feeder-10kg.webp", "FEED-10KG", 150,
        capacity="10 Kg", material="Plastic", suitable="Large flocks",
    ),
    equipment(
        "feeder-12kg", "12 Kg Feeder", Category.FEEDERS,
        "12kg capacity feeder for commercial operations. Maximum feed storage capacity.",
        750, 600, "/products/feeders/feeder-12kg.webp", "FEED-12KG", 100,
        capacity="12 Kg", material="Durable plastic", suitable="Commercial farms",
    ),
]

DRINKERS = [
    equipment(
        "nipple-single", "Nipple Drinker (Single)", Category.DRINKERS,
        "Single nipple drinker for water-saving and hygiene. Easy to install.",
        80, 75, "/products/drinkers/nipple-single.webp", "DRINK-NIP-SGL", 200,
        type="Nipple system", configuration="Single",
    ),
    equipment(
        "nipple-with-cups", "Nipple Drinker with Cups", Category.DRINKERS,
        "Nipple drinker with attached cups for easy drinking access.",
        100, 90, "/products/drinkers/nipple-with-cups.webp", "DRINK-NIP-CUP", 150,
        type="Nipple system", features="With cups",
    ),
    equipment(
        "bucket-nipple", "Bucket Nipple Drinker", Category.DRINKERS,
        "Nipple system designed for bucket mounting. Perfect for small setups.",
        100, 90, "/products/drinkers/bucket-nipple.webp", "DRINK-NIP-BCK", 120,
        type="Nipple system", mounting="Bucket-compatible",
    ),
    equipment(
        "double-nipple-cups", "Double Nipple with Cups", Category.DRINKERS,
        "Double nipple drinker system with cups. Modern water-saving technology.",
        150, 140, "/products/drinkers/double-nipple-cups.webp", "DRINK-NIP-DBL-CUP", 100,
        type="Nipple system", configuration="Double with cups",
    ),
    equipment(
        "drinker-no2", "Drinker No.2", Category.DRINKERS,
        "Standard gravity-fed drinker. Reliable and easy to maintain.",
        250, 220, "/products/drinkers/drinker-no2.webp", "DRINK-NO2", 100,
        type="Gravity-fed", capacity="Standard",
    ),
    equipment(
        "drinker-3l", "3L Drinker", Category.DRINKERS,
        "3-liter capacity gravity-fed drinker. Ideal for small to medium flocks.",
        250, 230, "/products/drinkers/drinker-3l.webp", "DRINK-3L", 150,
        capacity="3 Litres", type="Gravity-fed",
    ),
    equipment(
        "drinker-no2-7l", "Drinker No.2 (7 Litres)", Category.DRINKERS,
        "Large 7-litre capacity drinker for bigger flocks. Reduces refilling frequency.",
        500, 420, "/products/drinkers/drinker-no2-7l.webp", "DRINK-NO2-7L", 80,
        capacity="7 Litres", type="Gravity-fed",
    ),
    # Retail price only
    equipment(
        "bucket-model-drinker", "Bucket Model Drinker", Category.DRINKERS,
        "Professional bucket-style drinker system for commercial operations.",
        1000, 1000, "/products/drinkers/bucket-model.webp", "DRINK-BCK-MDL", 50,
        type="Bucket model", suitable="Commercial farms",
    ),
    equipment(
        "auto-drinker-small", "Auto Drinker (Small)", Category.DRINKERS,
        "Automatic water dispensing system for consistent water supply. Small capacity.",
        1100, 1000, "/products/drinkers/auto-small.webp", "DRINK-AUTO-SML", 40,
        type="Automatic", size="Small",
    ),
    equipment(
        "auto-drinker-big", "Auto Drinker (Big)", Category.DRINKERS,
        "Large automatic water system for commercial operations. Advanced water management.",
        1500, 1300, "/products/drinkers/auto-big.webp", "DRINK-AUTO-BIG", 30,
        type="Automatic", size="Large", suitable="Commercial farms",
    ),
]

BROODING_EQUIPMENT = [
    equipment(
        "bulb-holder", "Bulb Holder", Category.BROODING_EQUIPMENT,
        "Heavy-duty bulb holder for brooding lamps. Safe and secure mounting.",
        120, 100, "/products/brooding/bulb-holder.webp", "BROOD-HOLDER", 200,
        type="Electrical accessory", material="Heat-resistant",
    ),
    equipment(
        "watering-can", "Watering Can", Category.BROODING_EQUIPMENT,
        "Durable watering can for manual water distribution. Easy to handle.",
        350, 320, "/products/brooding/watering-can.webp", "BROOD-WATER-CAN", 100,
        type="Manual", material="Plastic",
    ),
    equipment(
        "spray-pump-small", "Spray Pump (Small)", Category.BROODING_EQUIPMENT,
        "Compact spray pump for disinfection and pest control in small coops.",
        450, 380, "/products/brooding/spray-pump-small.webp", "BROOD-SPRAY-SML", 90,
        capacity="Small", type="Manual pump",
    ),
    equipment(
        "brooding-pot-small", "Brooding Pot (Small)", Category.BROODING_EQUIPMENT,
        "Small capacity brooding pot for warming chicks. Energy-efficient design.",
        600, 400, "/products/brooding/brooding-pot-small.webp", "BROOD-POT-SML", 60,
        capacity="Small", type="Heating pot",
    ),
    equipment(
        "brooding-bulb-250w", "Brooding Bulb 250W", Category.BROODING_EQUIPMENT,
        "250W infrared brooding bulb for optimal chick warming. Long-lasting performance.",
        600, 550, "/products/brooding/brooding-bulb-250w.webp", "BROOD-BULB-250W", 150,
        wattage="250W", type="Infrared", suitable="Brooding",
    ),
    equipment(
        "brooding-pot-big", "Brooding Pot (Big)", Category.BROODING_EQUIPMENT,
        "Large capacity brooding pot for bigger chick batches. Efficient heat distribution.",
        800, 700, "/products/brooding/brooding-pot-big.webp", "BROOD-POT-BIG", 40,
        capacity="Large", type="Heating pot",
    ),
    equipment(
        "spray-pump-20l", "20L Spray Pump", Category.BROODING_EQUIPMENT,
        "Large 20-litre pressure spray pump for commercial disinfection and pest control.",
        2000, 1800, "/products/brooding/spray-pump-20l.webp", "BROOD-SPRAY-20L", 25,
        capacity="20 Litres", type="Pressure pump",
    ),
    # Wholesale price only
    equipment(
        "cooler-box-4-5l", "Cooler Box 4.5L", Category.BROODING_EQUIPMENT,
        "Insulated cooler box for transporting chicks and maintaining temperature during transit.",
        2200, 2200, "/products/brooding/cooler-box-4-5l.webp", "BROOD-COOL-4-5L", 20,
        capacity="4.5 Litres", type="Insulated", purpose="Chick transportation",
    ),
]

AUTOMATIC_INCUBATORS = [
    equipment(
        "incubator-64-eggs", "64 Eggs Automatic Incubator", Category.AUTOMATIC_INCUBATORS,
        "Fully automatic 64-egg capacity incubator. Digital temperature and humidity control.",
        12500, 12000, "/products/incubators/incubator-64-eggs.webp", "INCUB-64", 15,
        unit="unit", min_qty=1,
        capacity="64 Eggs", type="Fully automatic", features="Digital controls",
    ),
    equipment(
        "incubator-128-eggs", "128 Eggs Automatic Incubator", Category.AUTOMATIC_INCUBATORS,
        "128-egg capacity incubator for small to medium-scale hatching operations.",
        21500, 21000, "/products/incubators/incubator-128-eggs.webp", "INCUB-128", 12,
        unit="unit", min_qty=1,
        capacity="128 Eggs", type="Fully automatic", features="Digital controls",
    ),
    equipment(
        "incubator-204-eggs", "204 Eggs Automatic Incubator", Category.AUTOMATIC_INCUBATORS,
        "204-egg capacity incubator for growing operations. Reliable and efficient hatching.",
        30000, 29500, "/products/incubators/incubator-204-eggs.webp", "INCUB-204", 8,
        unit="unit", min_qty=1,
        capacity="204 Eggs", type="Fully automatic", features="Advanced controls",
    ),
    equipment(
        "incubator-256-eggs", "256 Eggs Automatic Incubator", Category.AUTOMATIC_INCUBATORS,
        "256-egg capacity incubator for medium-scale commercial hatching.",
        37000, 36000, "/products/incubators/incubator-256-eggs.webp", "INCUB-256", 10,
        unit="unit", min_qty=1,
        capacity="256 Eggs", type="Fully automatic", features="Advanced controls",
    ),
    equipment(
        "incubator-528-eggs", "528 Eggs Automatic Incubator", Category.AUTOMATIC_INCUBATORS,
        "Large 528-egg capacity incubator for commercial hatcheries. Advanced automation.",
        60000, 58000, "/products/incubators/incubator-528-eggs.webp", "INCUB-528", 5,
        unit="unit", min_qty=1,
        capacity="528 Eggs", type="Commercial-grade", features="Advanced automation",
    ),
    equipment(
        "incubator-1056-eggs", "1056 Eggs Automatic Incubator", Category.AUTOMATIC_INCUBATORS,
        "Premium 1056-egg capacity incubator for large-scale commercial operations. "
        "Top-tier automation and monitoring.",
        78000, 76500, "/products/incubators/incubator-1056-eggs.webp", "INCUB-1056", 3,
        unit="unit", min_qty=1,
        capacity="1056 Eggs", type="Premium commercial", features="Advanced monitoring",
    ),
]

CAGES_AND_MESH = [
    equipment(
        "plastic-mesh-roll", "Plastic Mesh Roll", Category.CAGES_AND_MESH,
        "Durable plastic mesh roll for constructing poultry houses, partitions, and flooring.",
        8500, 8000, "/products/cages-mesh/plastic-mesh-roll.webp", "MESH-PLST", 25,
        unit="roll", min_qty=5,
        type="Plastic mesh", usage="Construction, partitions",
    ),
    # Wholesale price only
    equipment(
        "4-tier-layer-cage", "4 Tier Layer Cage", Category.CAGES_AND_MESH,
        "Complete 4-tier layer cage system for efficient space utilization. "
        "Includes feeding and water systems.",
        40000, 40000, "/products/cages-mesh/4-tier-layer-cage.webp", "CAGE-4TIER", 8,
        unit="unit", min_qty=1,
        tiers="4 Levels", type="Complete cage system", features="Feeding & water systems included",
    ),
]

CHICKENS = [
    chicks(
        "improved-kienyeji", "Improved Kienyeji",
        "Improved Kienyeji chickens - hardy, disease-resistant, and excellent for dual-purpose "
        "(meat and eggs). Available from day-old to point of lay.",
        "/products/chickens/improved-kienyeji.webp", "CHICK-IMP-KIEN",
        {
            "1-3 days": 100,
            "1 week": 140,
            "2 weeks": 170,
            "3 weeks": 200,
            "4 weeks": 250,
            "2 months": 450,
            "3 months": 600,
            "Point of lay": 850,
        },
        breed="Improved Kienyeji",
        purpose="Dual-purpose (meat & eggs)",
        characteristics="Hardy, disease-resistant",
    ),
    chicks(
        "layers", "Layers",
        "High-production layer chickens for commercial egg farming. Excellent egg-laying "
        "capacity. Available from day-old to point of lay.",
        "/products/chickens/layers.webp", "CHICK-LAYERS",
        {
            "Day old": 155,
            "1 week": 185,
            "2 weeks": 220,
            "3 weeks": 280,
            "4 weeks": 320,
            "Point of lay": 850,
        },
        breed="Layers",
        purpose="Egg production",
        characteristics="High egg-laying capacity",
    ),
]

PRODUCTS: list[Product] = (
    FEEDERS
    + DRINKERS
    + BROODING_EQUIPMENT
    + AUTOMATIC_INCUBATORS
    + CAGES_AND_MESH
    + CHICKENS
)
