from bird_clear_sky import bird_clear_sky, bird_clear_sky_frame

# --- 1) Single evaluation (zenith and r as a solar-position algorithm would give them) ---
res = bird_clear_sky(
    50.11162202402973,   # zenith [deg]
    0.9965422973539708,  # r [AU]
    820,                 # pressure [mb]
    0.3,                 # ozone [cm]
    1.5,                 # water [cm]
    0.08,                # taua
    0.85,                # ba
    0.2,                 # albedo
    dni_mod=0.0,
)

print("=== Bird clear-sky model ===")
print(f"air mass = {res.amass:.4f}")
print(f"direct normal solar irradiance:      {res.direct_normal:.4f} [W/m^2]")
print(f"global horizontal solar irradiance:  {res.global_horiz:.4f} [W/m^2]")
print(f"diffuse horizontal solar irradiance: {res.diffuse_horiz:.4f} [W/m^2]")
# expected: 874.5066 / 664.8749 / 104.0591

t = res.transmittances
print(
    f"\nTransmittances: rayleigh={t.rayleigh:.4f} ozone={t.ozone:.4f} gases={t.gases:.4f} "
    f"water={t.water:.4f} aerosol={t.aerosol:.4f}"
)

# --- 2) Same site with a thin haze (DNI reduced to 80%) ---
hazy = res.recompute(dni_mod=0.8)
print("\nWith dni_mod = 0.8:")
print(f"DNI mod = {hazy.direct_normal_mod:.4f}  GHI mod = {hazy.global_horiz_mod:.4f}  DHI mod = {hazy.diffuse_horiz_mod:.4f}")

# --- 3) Zenith sweep ---
zen = [0.0, 15.0, 30.0, 45.0, 60.0, 75.0, 85.0, 89.9, 90.0]
sweep = bird_clear_sky_frame(zen, 1.0, pressure=820, ozone=0.3, water=1.5, taua=0.08, ba=0.85, albedo=0.2)
sweep.insert(0, "zenith", zen)
print("\nZenith sweep (r = 1 AU):")
print(sweep.round(3).to_string(index=False))
