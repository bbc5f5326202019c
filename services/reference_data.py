"""
Static reference catalog: Uttar Pradesh districts with approximate centroids.

Seeded into the database on every sync so the catalog exists before any
performance record refers to it.
"""

REGIONS = [
    {"code": "UP", "name": "Uttar Pradesh"},
]

# (code, name, latitude, longitude)
_UP_DISTRICTS = [
    ("UP001", "Agra", 27.1767, 78.0081),
    ("UP002", "Aligarh", 27.8974, 78.0880),
    ("UP003", "Allahabad", 25.4358, 81.8463),
    ("UP004", "Ambedkar Nagar", 26.4056, 82.6969),
    ("UP005", "Amethi", 26.1500, 81.8000),
    ("UP006", "Amroha", 28.9030, 78.4693),
    ("UP007", "Auraiya", 26.4667, 79.5167),
    ("UP008", "Ayodhya", 26.7923, 82.2043),
    ("UP009", "Azamgarh", 26.0674, 83.1836),
    ("UP010", "Baghpat", 28.9500, 77.2167),
    ("UP011", "Bahraich", 27.5742, 81.5942),
    ("UP012", "Ballia", 25.7613, 84.1471),
    ("UP013", "Balrampur", 27.4294, 82.1833),
    ("UP014", "Banda", 25.4776, 80.3390),
    ("UP015", "Barabanki", 26.9260, 81.1952),
    ("UP016", "Bareilly", 28.3670, 79.4304),
    ("UP017", "Basti", 26.8000, 82.7167),
    ("UP018", "Bhadohi", 25.4084, 82.5669),
    ("UP019", "Bijnor", 29.3721, 78.1363),
    ("UP020", "Budaun", 28.0381, 79.1264),
    ("UP021", "Bulandshahr", 28.4039, 77.8573),
    ("UP022", "Chandauli", 25.2569, 83.2681),
    ("UP023", "Chitrakoot", 25.2000, 80.9000),
    ("UP024", "Deoria", 26.5047, 83.7872),
    ("UP025", "Etah", 27.5667, 78.6667),
    ("UP026", "Etawah", 26.7769, 79.0239),
    ("UP027", "Farrukhabad", 27.3917, 79.6300),
    ("UP028", "Fatehpur", 25.9304, 80.8000),
    ("UP029", "Firozabad", 27.1500, 78.4000),
    ("UP030", "Gautam Buddha Nagar", 28.5355, 77.3910),
    ("UP031", "Ghaziabad", 28.6692, 77.4538),
    ("UP032", "Ghazipur", 25.5833, 83.5667),
    ("UP033", "Gonda", 27.1333, 81.9500),
    ("UP034", "Gorakhpur", 26.7606, 83.3732),
    ("UP035", "Hamirpur", 25.9500, 80.1500),
    ("UP036", "Hapur", 28.7304, 77.7814),
    ("UP037", "Hardoi", 27.4167, 80.1167),
    ("UP038", "Hathras", 27.6000, 78.0500),
    ("UP039", "Jalaun", 26.1500, 79.3500),
    ("UP040", "Jaunpur", 25.7333, 82.6833),
    ("UP041", "Jhansi", 25.4484, 78.5685),
    ("UP042", "Kannauj", 27.0667, 79.9167),
    ("UP043", "Kanpur Dehat", 26.5000, 80.0000),
    ("UP044", "Kanpur Nagar", 26.4499, 80.3319),
    ("UP045", "Kasganj", 27.8167, 78.6500),
    ("UP046", "Kaushambi", 25.3333, 81.3833),
    ("UP047", "Kheri", 27.9167, 80.8000),
    ("UP048", "Kushinagar", 26.7406, 83.8889),
    ("UP049", "Lalitpur", 24.6833, 78.4167),
    ("UP050", "Lucknow", 26.8467, 80.9462),
    ("UP051", "Maharajganj", 27.1333, 83.5667),
    ("UP052", "Mahoba", 25.2833, 79.8667),
    ("UP053", "Mainpuri", 27.2333, 79.0167),
    ("UP054", "Mathura", 27.4924, 77.6737),
    ("UP055", "Mau", 25.9417, 83.5611),
    ("UP056", "Meerut", 28.9845, 77.7064),
    ("UP057", "Mirzapur", 25.1500, 82.5667),
    ("UP058", "Moradabad", 28.8386, 78.7733),
    ("UP059", "Muzaffarnagar", 29.4667, 77.7000),
    ("UP060", "Pilibhit", 28.6333, 79.8000),
    ("UP061", "Pratapgarh", 25.9000, 81.9500),
    ("UP062", "Prayagraj", 25.4358, 81.8463),
    ("UP063", "Raebareli", 26.2309, 81.2332),
    ("UP064", "Rampur", 28.8000, 79.0167),
    ("UP065", "Saharanpur", 29.9667, 77.5500),
    ("UP066", "Sambhal", 28.5833, 78.5500),
    ("UP067", "Sant Kabir Nagar", 26.7667, 83.1833),
    ("UP068", "Shahjahanpur", 27.8833, 79.9167),
    ("UP069", "Shamli", 29.4500, 77.3167),
    ("UP070", "Shravasti", 27.5167, 82.0167),
    ("UP071", "Siddharthnagar", 27.3000, 83.0833),
    ("UP072", "Sitapur", 27.5667, 80.6833),
    ("UP073", "Sonbhadra", 24.6833, 83.0667),
    ("UP074", "Sultanpur", 26.2667, 82.0667),
    ("UP075", "Unnao", 26.5500, 80.4833),
    ("UP076", "Varanasi", 25.3176, 82.9739),
]

DISTRICTS = [
    {"code": code, "name": name, "parent_code": "UP", "latitude": lat, "longitude": lon}
    for code, name, lat, lon in _UP_DISTRICTS
]
