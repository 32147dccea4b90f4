"""Display name pools for generated rosters."""

from typing import Dict, Tuple

from classroom_sim.models.seating import Gender


NAME_POOLS: Dict[Gender, Tuple[str, ...]] = {
    Gender.MALE: (
        "Noam", "Itay", "Ariel", "Yonatan", "Omer", "Eitan", "Daniel", "Uri",
        "Amit", "Yuval", "Ido", "Roee", "Lior", "Guy", "Tomer", "Nadav",
        "Alon", "Yoav", "Matan", "Shai", "Oren", "Asaf", "Gilad", "Erez",
        "Ron", "Elad", "Nir", "Tal", "Ziv", "Dor", "Avi", "Yair",
        "Barak", "Ohad", "Harel",
    ),
    Gender.FEMALE: (
        "Noa", "Maya", "Tamar", "Yael", "Shira", "Michal", "Adi", "Avigail",
        "Hila", "Roni", "Lihi", "Neta", "Inbar", "Gal", "Dana", "Sivan",
        "Keren", "Efrat", "Hadas", "Liat", "Orly", "Rotem", "Shani", "Talia",
        "Yarden", "Ayelet", "Dafna", "Einav", "Hagar", "Irit", "Merav", "Naama",
        "Osnat", "Ravit", "Stav",
    ),
}
