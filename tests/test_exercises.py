from formfitness.exercises import Exercise, ExerciseStore, default_exercises


def test_default_catalog():
    names = [(e.name, e.image_name) for e in default_exercises()]
    assert names == [
        ("Push-ups", "pushups"),
        ("Squats", "squats"),
        ("Downward Dog", "downward-dog"),
        ("Plank", "plank3"),
        ("Warrior 1", "warrior-1"),
    ]


def test_exercise_ids_are_unique():
    ids = {e.id for e in default_exercises()}
    assert len(ids) == 5


def test_toggle_favorite():
    store = ExerciseStore()
    plank = store.find("Plank")

    assert store.favorite_exercises == []
    store.toggle_favorite(plank)
    assert store.favorite_exercises == [plank]
    store.toggle_favorite(plank)
    assert store.favorite_exercises == []


def test_toggle_unknown_exercise_is_ignored():
    store = ExerciseStore()
    store.toggle_favorite(Exercise(name="Lunges", image_name="lunges"))
    assert store.favorite_exercises == []


def test_find_by_name_or_image():
    store = ExerciseStore()
    assert store.find("squats").name == "Squats"
    assert store.find("Warrior 1").image_name == "warrior-1"
    assert store.find("burpees") is None


def test_custom_catalog():
    store = ExerciseStore([Exercise(name="Lunges", image_name="lunges", is_favorite=True)])
    assert [e.name for e in store.favorite_exercises] == ["Lunges"]
