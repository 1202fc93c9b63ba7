"""Handles interactive/command-line mode for forthlang. Uses cmd as backend."""

import cmd


class Shell(cmd.Cmd):
    """forthlang interpreter shell."""
    intro = "forthlang :: Python backend\nType 'help' for more information, 'bye' to leave."
    prompt = "> "
    secondary_prompt = ". "  # used while a definition is open
    _tmp_prompt = "> "       # also used for prompt swapping after definitions close

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess
        self.line_num = 0

    def default(self, line):
        """Runs arbitrary forthlang source."""
        self.line_num += 1

        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.sess.run(line, self.line_num)

        if not self.sess.error_handler.thrown:
            print("ok")

        self.prompt = self.secondary_prompt if self.sess.compiling else self._tmp_prompt

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to forthlang!\n\n"
              "forthlang is a small Forth: type whitespace separated words and they run at once, \n"
              "numbers (42, -7) and characters ('a') are pushed on the data stack.\n\n"
              "Try '2 3 + .', which prints 5. Define new words with ': name ... ;', \n"
              "for example ': square dup * ; 4 square .'. 'words' lists everything defined.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_bye(arg)

    def do_bye(self, arg):
        """Exits interpreter."""
        return True
