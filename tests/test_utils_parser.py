from ffedit.utils import parser


def test_compose():
    args = {
        "global_options": {"y": None},
        "inputs": [("a.png", {"loop": 1}), ("in.mp4", None)],
        "outputs": [
            (
                "out.mp4",
                {
                    "filter_complex": "[0:v][1:v]overlay[0_0:v]",
                    "map": ["[0_0:v]", "1:a?"],
                    "c:a": "copy",
                    "crf": "23",
                    "shortest": parser.FLAG,
                },
            )
        ],
    }

    assert parser.compose(args, command="ffmpeg") == [
        "ffmpeg",
        "-y",
        "-loop",
        "1",
        "-i",
        "a.png",
        "-i",
        "in.mp4",
        "-filter_complex",
        "[0:v][1:v]overlay[0_0:v]",
        "-map",
        "[0_0:v]",
        "-map",
        "1:a?",
        "-c:a",
        "copy",
        "-crf",
        "23",
        "-shortest",
        "out.mp4",
    ]


def test_compose_without_command():
    args = {"outputs": [("o.gif", {"frames:v": 1, "loop": 0})]}
    assert parser.compose(args) == ["-frames:v", "1", "-loop", "0", "o.gif"]


def test_compose_shell_command():
    args = {"inputs": [("my clip.mp4", None)], "outputs": [("out.mp4", {"vf": "hflip,vflip"})]}
    assert (
        parser.compose(args, command="ffmpeg", shell_command=True)
        == "ffmpeg -i 'my clip.mp4' -vf hflip,vflip out.mp4"
    )
